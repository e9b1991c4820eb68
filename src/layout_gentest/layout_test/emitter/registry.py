from layout_gentest.layout_test.emitter.base import Emitter
from layout_gentest.layout_test.emitter.cxx import CxxEmitter
from layout_gentest.layout_test.errors import ConfigurationError

EMITTERS: dict[str, type[Emitter]] = {
    CxxEmitter.name: CxxEmitter,
}


def get_emitter_class(name: str) -> type[Emitter]:
    """Look up a backend by its configured name (e.g. "cxx")."""
    try:
        return EMITTERS[name]
    except KeyError:
        known = ", ".join(sorted(EMITTERS))
        raise ConfigurationError(f"Unknown emitter backend '{name}' (known: {known})") from None


def create_emitter(name: str, suite_name: str | None = None, honor_insert_index: bool = False) -> Emitter:
    """Build a fresh emitter; one instance renders exactly one fixture."""
    return get_emitter_class(name)(suite_name=suite_name, honor_insert_index=honor_insert_index)
