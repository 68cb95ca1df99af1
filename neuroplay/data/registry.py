"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, MutableMapping

from ..core.types import Batch, Dataset, to_batch
from . import gates, generators

TASK_TYPES = frozenset({"binary", "regression"})


@dataclass(frozen=True)
class DataSpec:
    """Structural information about a dataset.

    Attributes
    ----------
    d_in:
        Width of each sample's input vector.
    d_out:
        Width of each sample's target vector.
    task_type:
        One of ``{"binary", "regression"}``.
    extra:
        Free-form metadata, for example the plotting bounds that frame the
        dataset for decision-boundary rendering.
    """

    d_in: int
    d_out: int
    task_type: str
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DatasetSpec:
    """A materialised dataset registered in the system."""

    name: str
    samples: Dataset
    data_spec: DataSpec
    provenance: Dict[str, Any]

    def __len__(self) -> int:
        return len(self.samples)

    def as_batch(self) -> Batch:
        return to_batch(self.samples)


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("moons")
        def make_moons(**kwargs):
            ...

    or directly::

        register_dataset("moons", make_moons)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(dataset: str, /, **options: Any) -> DatasetSpec:
    """Build the :class:`DatasetSpec` registered as ``dataset``."""

    if dataset not in _REGISTRY:
        available = ", ".join(available_datasets())
        raise KeyError(f"Unknown dataset {dataset!r}. Available datasets: {available}")
    spec = _REGISTRY[dataset](**options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    if spec.data_spec.task_type not in TASK_TYPES:
        raise ValueError(f"Invalid task type: {spec.data_spec.task_type}")
    for idx, sample in enumerate(spec.samples):
        if sample.inputs.size != spec.data_spec.d_in:
            raise ValueError(
                f"Sample {idx} of {spec.name!r} has {sample.inputs.size} inputs, "
                f"expected {spec.data_spec.d_in}"
            )
        if sample.targets.size != spec.data_spec.d_out:
            raise ValueError(
                f"Sample {idx} of {spec.name!r} has {sample.targets.size} targets, "
                f"expected {spec.data_spec.d_out}"
            )


def _playground_factory(name: str, bounds: float) -> DatasetFactory:
    generate = generators.GENERATORS[name]

    def _factory(n: int = 200, seed: int = 0, **options: Any) -> DatasetSpec:
        samples = generate(n, seed=seed, **options)
        provenance = {"type": "synthetic", "generator": name, "n": int(n), "seed": seed}
        provenance.update(options)
        return DatasetSpec(
            name=name,
            samples=samples,
            data_spec=DataSpec(
                d_in=2, d_out=1, task_type="binary", extra={"bounds": bounds}
            ),
            provenance=provenance,
        )

    return _factory


def _gate_factory(gate: str) -> DatasetFactory:
    def _factory(**_: object) -> DatasetSpec:
        return DatasetSpec(
            name=f"{gate}_gate",
            samples=gates.truth_table(gate),
            data_spec=DataSpec(d_in=2, d_out=1, task_type="binary", extra={"bounds": 1.5}),
            provenance={"type": "truth_table", "gate": gate},
        )

    return _factory


for _name, _bounds in (
    ("circle", 6.0),
    ("xor", 6.0),
    ("spiral", 6.0),
    ("gaussian", 6.0),
    ("checkerboard", 4.0),
):
    register_dataset(_name, _playground_factory(_name, _bounds))

for _gate in gates.available_gates():
    register_dataset(f"{_gate}_gate", _gate_factory(_gate))


__all__ = [
    "DataSpec",
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
