"""
Semantic Type Definitions & Validation Primitives.

Annotated pydantic types shared by every configuration section. Constraints
live here so that invalid values are rejected when the manifest is built,
before any dataset is read or any trial is started.
"""

# =========================================================================== #
#                                Standard Imports                             #
# =========================================================================== #
from pathlib import Path
from typing import Annotated, Literal

# =========================================================================== #
#                                Third-Party Imports                          #
# =========================================================================== #
from pydantic import AfterValidator, Field, PlainSerializer

# =========================================================================== #
#                                VALIDATORS                                   #
# =========================================================================== #


def _sanitize_path(v: Path) -> Path:
    """Resolve path to absolute form without disk side-effects."""
    return v.expanduser().resolve()


# =========================================================================== #
#                                1. GENERIC PRIMITIVES                        #
# =========================================================================== #

PositiveInt      = Annotated[int, Field(gt=0)]
NonNegativeInt   = Annotated[int, Field(ge=0)]
PositiveFloat    = Annotated[float, Field(gt=0)]
NonNegativeFloat = Annotated[float, Field(ge=0.0)]
Probability      = Annotated[float, Field(ge=0.0, le=1.0)]

# =========================================================================== #
#                                2. FILESYSTEM                                #
# =========================================================================== #

ValidatedPath = Annotated[
    Path,
    AfterValidator(_sanitize_path),
    PlainSerializer(lambda v: str(v), when_used="json", return_type=str),
]

# =========================================================================== #
#                                3. HARDWARE & PERFORMANCE                    #
# =========================================================================== #

WorkerCount = Annotated[int, Field(ge=0)]
BatchSize   = Annotated[int, Field(ge=1, le=2048)]
DeviceName  = Literal["auto", "cpu", "cuda", "mps"]

# =========================================================================== #
#                                4. MODEL GEOMETRY                            #
# =========================================================================== #

ImageSize   = Annotated[int, Field(ge=8, le=1024)]
Channels    = Annotated[int, Field(ge=1, le=16)]
ConvWidth   = Annotated[int, Field(ge=1, le=1024)]
KernelSize  = Annotated[int, Field(ge=1, le=11)]
DropoutRate = Annotated[float, Field(ge=0.0, le=0.9)]

# =========================================================================== #
#                                5. OPTIMIZATION                              #
# =========================================================================== #

OptimizerName = Literal["adam", "adamw", "sgd", "rmsprop"]
LearningRate  = Annotated[float, Field(gt=1e-8, lt=1.0)]
WeightDecay   = Annotated[float, Field(ge=0.0, le=0.2)]
Momentum      = Annotated[float, Field(ge=0.0, lt=1.0)]
GradNorm      = Annotated[float, Field(ge=0.0, le=100.0)]
Epsilon       = Annotated[float, Field(gt=0.0, le=1e-2)]

# =========================================================================== #
#                                6. SEARCH                                    #
# =========================================================================== #

FoldCount     = Annotated[int, Field(ge=2, le=20)]
SamplerType   = Literal["tpe", "random", "cmaes"]
PrunerType    = Literal["median", "percentile", "hyperband", "none"]

# =========================================================================== #
#                                7. SYSTEM & METADATA                         #
# =========================================================================== #

ProjectSlug = Annotated[
    str,
    Field(pattern=r"^[a-z0-9_-]+$", min_length=3, max_length=50),
]
LogFrequency = Annotated[int, Field(ge=1, le=1000)]
LogLevel     = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
