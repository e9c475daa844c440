"""
Heatmap parameters and kernel argument packing.

HeatmapParameters is the validated configuration of one heatmap
computation. kernel_arguments() reduces it to the four numbers both density
engines feed to their kernel implementation, so that the choice of
distribution and the cutoff are decided in exactly one place.
"""

from enum import Enum
from typing import NamedTuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .. import constants as cte


class DistributionMethod(str, Enum):
    """Radial dispersal kernels available to the density engines."""

    GAUSSIAN = "gaussian"
    LEVY_FLIGHT = "levy-flight"
    EXPONENTIAL = "exponential"

    @property
    def method_id(self) -> int:
        return _METHOD_IDS[self]

    @property
    def label(self) -> str:
        return _METHOD_LABELS[self]


_METHOD_IDS = {
    DistributionMethod.GAUSSIAN: cte.GAUSSIAN,
    DistributionMethod.LEVY_FLIGHT: cte.LEVY_FLIGHT,
    DistributionMethod.EXPONENTIAL: cte.EXPONENTIAL,
}

_METHOD_LABELS = {
    DistributionMethod.GAUSSIAN: "Gaussian",
    DistributionMethod.LEVY_FLIGHT: "Levy-flight",
    DistributionMethod.EXPONENTIAL: "Exponential",
}


class HeatmapParameters(BaseModel):
    """
    Configuration of a density heatmap computation.

    Values are validated on construction; an invalid configuration raises
    pydantic.ValidationError before any computation starts. Instances are
    immutable. Field names are snake_case but the camelCase spelling used by
    flight-log front ends (maxDistance, levyAlpha, ...) is accepted too.

    Example:
        params = HeatmapParameters(sigma=8, max_distance=30)
        params = HeatmapParameters.model_validate({"sigma": 8, "maxDistance": 30,
                                                   "distributionMethod": "levy-flight"})
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        allow_inf_nan=False,
    )

    sigma: float = Field(
        default=cte.DEFAULT_SIGMA,
        gt=0,
        description="Kernel scale in meters",
    )
    max_distance: float = Field(
        default=cte.DEFAULT_MAX_DISTANCE,
        gt=0,
        description="Hard cutoff distance in meters",
    )
    insects_per_drop: float = Field(
        default=cte.DEFAULT_INSECTS_PER_DROP,
        ge=0,
        description="Insects released per drop point",
    )
    resolution_multiplier: int = Field(
        default=cte.DEFAULT_RESOLUTION,
        ge=1,
        validation_alias=AliasChoices("resolution_multiplier", "resolutionMultiplier", "resolution"),
        description="Canvas pixels per display pixel",
    )
    distribution_method: DistributionMethod = Field(
        default=DistributionMethod.GAUSSIAN,
        description="Dispersal kernel",
    )
    levy_alpha: float = Field(
        default=cte.DEFAULT_LEVY_ALPHA,
        ge=1.0,
        le=2.0,
        description="Levy-flight stability exponent (levy-flight only)",
    )
    exponential_lambda: float = Field(
        default=cte.DEFAULT_EXPONENTIAL_LAMBDA,
        gt=0,
        description="Exponential decay rate in 1/m (exponential only)",
    )


class KernelArguments(NamedTuple):
    """
    Packed kernel configuration shared by the CPU and GPU engines.

    Attributes:
        method_id: cte.GAUSSIAN, cte.LEVY_FLIGHT or cte.EXPONENTIAL
        p0: sigma (gaussian, levy-flight) or lambda (exponential)
        p1: alpha (levy-flight), unused otherwise
        cutoff: max_distance in meters
    """

    method_id: int
    p0: float
    p1: float
    cutoff: float


def kernel_arguments(params: HeatmapParameters) -> KernelArguments:
    method = params.distribution_method
    if method is DistributionMethod.GAUSSIAN:
        return KernelArguments(cte.GAUSSIAN, params.sigma, 0.0, params.max_distance)
    if method is DistributionMethod.LEVY_FLIGHT:
        return KernelArguments(cte.LEVY_FLIGHT, params.sigma, params.levy_alpha, params.max_distance)
    return KernelArguments(cte.EXPONENTIAL, params.exponential_lambda, 0.0, params.max_distance)


def layer_label(params: HeatmapParameters) -> str:
    """
    Human readable name of a heatmap layer, e.g. "Gaussian σ=8m".

    The Levy-flight and exponential variants append their shape parameter.
    """
    label = f"{params.distribution_method.label} σ={params.sigma:g}m"
    if params.distribution_method is DistributionMethod.LEVY_FLIGHT:
        label += f", α={params.levy_alpha:g}"
    elif params.distribution_method is DistributionMethod.EXPONENTIAL:
        label += f", λ={params.exponential_lambda:g}"
    return label
