from layout_gentest.layout_test.emitter.base import Emitter
from layout_gentest.layout_test.emitter.cxx import CxxEmitter
from layout_gentest.layout_test.emitter.registry import create_emitter, get_emitter_class

__all__ = ["Emitter", "CxxEmitter", "create_emitter", "get_emitter_class"]
