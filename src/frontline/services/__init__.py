"""Service layer: the front controller and its supporting pieces.

INVARIANT: ``Dispatcher.handle_request`` returns a DispatchResult for every
terminal state; only unclassified command failures propagate as exceptions.
"""

from frontline.services.dispatcher import Dispatcher
from frontline.services.registry import Registry, RequestBuilder
from frontline.services.result import DispatchError, DispatchResult

__all__ = ["DispatchError", "DispatchResult", "Dispatcher", "Registry", "RequestBuilder"]
