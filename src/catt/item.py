"""
Abstract base class for items exposed by a binding.

An item is one readable/writable facet of a device, e.g. the on/off switch
or the color of a lamp.
"""

from abc import ABC, abstractmethod

from .meta import Meta
from .value import Value


class Item(ABC):
    """
    Named device facet with a current value.

    Subclasses must implement:
    - name: Stable name, unique within the binding
    - meta: Descriptor of backend and value type (may be computed lazily)
    - get_value(): Read the current value
    - set_value(): Apply a new value; on success the binding is expected to
      emit a Changed notification for the item
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def meta(self) -> Meta:
        pass

    @abstractmethod
    def get_value(self) -> Value:
        """
        Return the current value.

        Raises:
            Exception: Implementation specific, e.g. BindingError
        """
        pass

    @abstractmethod
    def set_value(self, value: Value) -> None:
        """
        Apply a new value to the device.

        Args:
            value: Requested value, coerced by the item as needed

        Raises:
            Exception: Implementation specific, e.g. CoercionError or BindingError
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"
