from typing import Dict, List, Union

from .types import Sequence, Value, release, to_python


class Environment:
    """Maps variable names to their current values.

    The environment owns one reference to every sequence it stores.
    ``set`` takes over the caller's reference, so callers hand in a
    handle they own and must not release it afterwards.
    """
    def __init__(self):
        self.values: Dict[str, Value] = {}

    @property
    def export_names(self) -> List[str]:
        return list(self.values.keys())

    def lookup(self, name: str) -> Value:
        # Unset variables read as zero. The returned handle is borrowed.
        return self.values.get(name, 0)

    def set(self, name: str, value: Value) -> None:
        old = self.values.get(name)
        self.values[name] = value
        if isinstance(old, Sequence):
            old.release()

    def snapshot(self) -> Dict[str, Union[int, List[int]]]:
        return {name: to_python(value) for name, value in self.values.items()}

    def teardown(self) -> None:
        for value in self.values.values():
            release(value)
        self.values.clear()
