"""Compiler subsystem package.

This package turns launcher definitions into native executables. It includes:
- Toolchain resolution: finds a C compiler on the search path
- ProcessRunner: runs toolchain commands with a timeout and cancellation
- BuildOrchestrator: generates sources, compiles, post-processes and relocates launchers

The typical workflow is:
1. Create an orchestrator: orchestrator = BuildOrchestrator(config)
2. Build the launchers: artifacts = orchestrator.build(launchers)
"""

from .orchestrator import BuildOrchestrator, build, quote_flags, relocate_binary
from .process import CancelToken, ProcessRunner, run_process
from .toolchain import CompilerInvocation, ToolchainFamily, find_compiler, resolve

__all__ = [
    "BuildOrchestrator",
    "CancelToken",
    "CompilerInvocation",
    "ProcessRunner",
    "ToolchainFamily",
    "build",
    "find_compiler",
    "quote_flags",
    "relocate_binary",
    "resolve",
    "run_process",
]
