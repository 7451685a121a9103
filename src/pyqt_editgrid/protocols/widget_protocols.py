"""
Widget ABC contracts for editable grid cells.

Defines explicit contracts that cell controls implement, so the binding engine
never duck-types Qt's signal names (textChanged vs currentIndexChanged vs
editingFinished).

Design Philosophy:
- Explicit inheritance over duck typing
- Fail-loud over fail-silent
- Multiple inheritance for composable capabilities
"""

from abc import ABC, abstractmethod
from typing import Any, Callable


class ValueGettable(ABC):
    """
    ABC for controls that can return a value.

    Bound controls implement this so a row form can read them back.
    """

    @abstractmethod
    def get_value(self) -> Any:
        """
        Get the current value from the control.

        Returns:
            The control's current value. None if no value set.
        """
        pass


class ValueSettable(ABC):
    """
    ABC for controls that can accept a value.

    Row forms push initial and reset values through this.
    """

    @abstractmethod
    def set_value(self, value: Any) -> None:
        """
        Set the control's value.

        Args:
            value: The value to set. None clears the control.
        """
        pass


class PlaceholderCapable(ABC):
    """ABC for controls that can display placeholder text."""

    @abstractmethod
    def set_placeholder(self, text: str) -> None:
        pass


class ChangeSignalEmitter(ABC):
    """
    ABC for controls that emit change signals.

    Change events drive soft updates: the live row record follows every
    keystroke or pick without a commit.
    """

    @abstractmethod
    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """
        Connect callback to the control's change signal.

        Args:
            callback: Function to call when the value changes.
                     Signature: callback(new_value: Any) -> None
        """
        pass


class CommitSignalEmitter(ABC):
    """
    ABC for controls whose edits are committed separately from changes.

    Text inputs commit when editing finishes (focus leaves or Return is
    pressed); the commit drives the hard update sent to the host.
    """

    @abstractmethod
    def connect_commit_signal(self, callback: Callable[[Any], None]) -> None:
        """
        Connect callback to the control's commit signal.

        Args:
            callback: Function to call with the committed value.
        """
        pass
