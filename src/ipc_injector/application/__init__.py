"""
Application layer - Use cases and orchestration.

This layer contains the container and the request pipeline that
orchestrate domain objects.
"""

from .application import Application, build_path
from .circular_detector import CircularDependencyDetector
from .container import Container
from .filters import FilterDispatcher, failure_envelope
from .guards import GuardChainEvaluator
from .invoker import HandlerInvoker, first_value, unwrap
from .lifetime_manager import LifetimeManager
from .params import ParameterResolver
from .pipeline import RequestPipeline
from .reflector import Reflector
from .resolver import DependencyResolver

__all__ = [
    "Application",
    "build_path",
    "Container",
    "DependencyResolver",
    "LifetimeManager",
    "CircularDependencyDetector",
    "Reflector",
    "GuardChainEvaluator",
    "ParameterResolver",
    "HandlerInvoker",
    "FilterDispatcher",
    "RequestPipeline",
    "failure_envelope",
    "first_value",
    "unwrap",
]
