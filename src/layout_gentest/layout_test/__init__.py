"""Layout-test generation: IR, emitters and fixture extraction."""
