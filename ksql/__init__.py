"""Provider mocks, dataclass row-filling helpers and sequence conversion for SQL tests."""

__version__ = "0.1.0"
__all__ = ["mocks", "ksqltest", "kstructs", "slices"]