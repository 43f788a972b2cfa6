"""
Core concurrency components: channels, completion groups, runners,
workers, the worker pool and the result collector.
"""

from .channel import Channel, END_OF_STREAM
from .completion_group import CompletionGroup
from .runner import Runner, go_func
from .worker import Worker
from .worker_pool import WorkerPool
from .collector import ResultCollector

__all__ = [
    'Channel',
    'END_OF_STREAM',
    'CompletionGroup',
    'Runner',
    'go_func',
    'Worker',
    'WorkerPool',
    'ResultCollector',
]
