"""Runtime predicates and their evaluation."""

from case_harness.errors import ConfigurationError
from case_harness.models.config import RunConfiguration
from case_harness.models.descriptor import RuntimePredicate


def evaluate(predicate: RuntimePredicate, config: RunConfiguration) -> bool:
    """Decide whether PREDICATE holds for CONFIG.

    Raises:
        ConfigurationError: If the predicate function fails or does not
            return a bool.

    """
    try:
        holds = predicate.func(config, predicate.value)
    except Exception as exc:
        raise ConfigurationError(
            f"Predicate '{predicate.description}' failed: {exc}"
        ) from exc

    if not isinstance(holds, bool):
        raise ConfigurationError(
            f"Predicate '{predicate.description}' returned "
            f"{type(holds).__name__}, expected bool"
        )
    return holds


def fs_type_is(config: RunConfiguration, value: str) -> bool:
    """Return True if the configured filesystem type is VALUE."""
    if not value:
        raise ValueError("empty fs-type in predicate")
    return config.fs_type == value


def fs_type_not(config: RunConfiguration, value: str) -> bool:
    """Return True if the configured filesystem type is not VALUE."""
    return not fs_type_is(config, value)


def pass_if_fs_type_is(fs_type: str) -> RuntimePredicate:
    """Run the test as PASS instead of its declared mode on backend FS_TYPE."""
    return RuntimePredicate(
        func=fs_type_is,
        value=fs_type,
        alternate_mode="pass",
        description=f"PASS if fs-type = {fs_type}",
    )


def pass_if_fs_type_is_not(fs_type: str) -> RuntimePredicate:
    """Run the test as PASS instead of its declared mode on any other backend."""
    return RuntimePredicate(
        func=fs_type_not,
        value=fs_type,
        alternate_mode="pass",
        description=f"PASS if fs-type != {fs_type}",
    )
