from entityguard.introspection.describe import describe, describe_path
from entityguard.introspection.entity import Entity, Float32, Int32

__all__ = ["Entity", "Float32", "Int32", "describe", "describe_path"]
