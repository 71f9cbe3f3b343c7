from .example_build_engine import ExampleBuildEngine, load_examples

__all__ = ["ExampleBuildEngine", "load_examples"]
