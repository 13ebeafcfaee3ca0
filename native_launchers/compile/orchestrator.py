"""Build orchestration: generate, compile, post-process and relocate every launcher."""

from __future__ import annotations

import errno
import logging
import os
import shutil
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from ..codegen import GeneratedSources, SourceGenerator
from ..data import BuildArtifact, BuildConfig, LauncherSpec, validate_launchers
from ..errors import ArtifactRelocationError, BuildCancelled
from ..logging import log_debug
from ..platforms import Platform, PlatformProfile
from .process import CancelToken, ProcessRunner
from .toolchain import CompilerInvocation, resolve

logger = logging.getLogger(__name__)


def quote_flags(args: Sequence[str], prefixes: Sequence[str]) -> List[str]:
    """Wrap the value of every flag starting with one of ``prefixes`` in double quotes.

    Values that are already quoted are left alone.

    Examples
    --------
    >>> quote_flags(["-DAUMID=Company.App", "-DDEBUG"], ["-DAUMID="])
    ['-DAUMID="Company.App"', '-DDEBUG']
    """
    quoted = []
    for arg in args:
        for prefix in prefixes:
            if arg.startswith(prefix):
                value = arg[len(prefix) :]
                if not (len(value) >= 2 and value.startswith('"') and value.endswith('"')):
                    arg = f'{prefix}"{value}"'
                break
        quoted.append(arg)
    return quoted


def relocate_binary(binary: Path, output_dir: Path) -> Path:
    """Move a compiled binary into ``output_dir``, replacing any existing file atomically.

    Moves across file systems copy into a temporary file next to the destination first, so
    the destination is never observed half-written.

    Raises
    ------
    ArtifactRelocationError
        If the binary is missing, the directory cannot be created or the move fails.
    """
    if not binary.is_file():
        raise ArtifactRelocationError(f"Compiler did not produce the expected binary {binary}")
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ArtifactRelocationError(f"Cannot create output directory {output_dir}: {e}") from e

    target = output_dir / binary.name
    try:
        os.replace(binary, target)
        return target
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise ArtifactRelocationError(f"Cannot move {binary} to {target}: {e}") from e

    staging = target.with_name(f".{target.name}.tmp")
    try:
        shutil.copy2(binary, staging)
        os.replace(staging, target)
        binary.unlink()
    except OSError as e:
        staging.unlink(missing_ok=True)
        raise ArtifactRelocationError(f"Cannot move {binary} to {target}: {e}") from e
    return target


class BuildOrchestrator:
    """Builds one native executable per launcher.

    The build is fail-fast: the first error aborts it and no artifacts are returned. Sources
    and shared files are all generated before the first compiler runs.

    Examples
    --------
    >>> orchestrator = BuildOrchestrator(config)
    >>> artifacts = orchestrator.build([LauncherSpec(name="hello", main_class="com.example.Main")])
    """

    def __init__(
        self,
        config: BuildConfig,
        platform: Optional[Platform] = None,
        runner: Optional[ProcessRunner] = None,
        toolchain: Optional[CompilerInvocation] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Initialize the orchestrator.

        Parameters
        ----------
        config : BuildConfig
            The validated build configuration.
        platform : Platform, optional
            Target platform. Defaults to the host platform.
        runner : ProcessRunner, optional
            Runner for the compiler and post-processing commands.
        toolchain : CompilerInvocation, optional
            Pre-resolved compiler. Resolved from ``config.compiler`` and the environment when
            omitted.
        environ : Mapping[str, str], optional
            Environment used for toolchain discovery. Defaults to ``os.environ``.
        """
        self._config = config
        self._platform = platform or Platform.current()
        self._profile: PlatformProfile = self._platform.profile
        self._runner = runner or ProcessRunner()
        self._toolchain = toolchain
        self._environ = environ
        self._generator = SourceGenerator(config, self._platform)

    @property
    def platform(self) -> Platform:
        return self._platform

    def resolve_toolchain(self) -> CompilerInvocation:
        if self._toolchain is None:
            self._toolchain = resolve(self._config.compiler, self._platform, self._environ)
        return self._toolchain

    def output_name(self, launcher: LauncherSpec) -> str:
        return self._profile.executable_name(launcher.name)

    def compile_command(
        self, toolchain: CompilerInvocation, launcher: LauncherSpec
    ) -> List[str]:
        """Assemble the compiler and linker arguments for one launcher.

        The order is fixed: compiler command, user compiler arguments, output file, launcher
        source, UI bootstrap, debug define, identity define and library, dynamic loading
        library, user linker arguments, library search paths and packaging flags.
        """
        profile = self._profile
        args = list(toolchain.argv)
        args += self._config.compiler_args
        args += toolchain.output_flags(self.output_name(launcher))
        args.append(launcher.c_file_name)
        if self._generator.needs_ui_bootstrap(launcher):
            args.append(profile.ui_bootstrap_source)
            args += profile.ui_framework_flags
        if self._config.debug:
            args.append("-DDEBUG")
        if profile.supports_identity and launcher.user_model_id:
            args.append(profile.identity_define + launcher.user_model_id)
            args += profile.identity_libraries.get(toolchain.family.value, ())
        args += profile.dynamic_loading_flags
        args += self._config.linker_args
        args += profile.library_search_flags
        args += profile.packaging_flags
        return quote_flags(args, profile.quoted_define_prefixes)

    def subsystem_flip_command(self, launcher: LauncherSpec) -> Optional[List[str]]:
        """The post-processing command that turns a console binary into a windowed one."""
        if launcher.console or not self._profile.needs_subsystem_flip:
            return None
        return list(self._profile.subsystem_flip_command) + [self.output_name(launcher)]

    def generate(self, launchers: Sequence[LauncherSpec]) -> GeneratedSources:
        return self._generator.generate(launchers)

    def build(
        self, launchers: Sequence[LauncherSpec], cancel_token: Optional[CancelToken] = None
    ) -> List[BuildArtifact]:
        """Generate, compile and relocate all launchers.

        Parameters
        ----------
        launchers : Sequence[LauncherSpec]
            Launchers in build order. Names must be unique.
        cancel_token : CancelToken, optional
            Cancelling it kills in-flight compiler processes and aborts the build.

        Returns
        -------
        List[BuildArtifact]
            One artifact per launcher, in the given order. Empty if the build is skipped.

        Raises
        ------
        LauncherError
            On the first failure of any step.
        """
        if self._config.skip:
            logger.info("Skipping native launcher generation (parameter skip is true)")
            return []

        launchers = validate_launchers(launchers)
        sources = self.generate(launchers)
        toolchain = self.resolve_toolchain()
        token = CancelToken(parent=cancel_token)

        if self._config.jobs > 1 and len(launchers) > 1:
            binaries = self._compile_parallel(launchers, toolchain, sources, token)
        else:
            binaries = [
                self._compile_launcher(launcher, toolchain, sources, token)
                for launcher in launchers
            ]

        # Binaries are only moved once every launcher compiled
        artifacts = [
            BuildArtifact(
                launcher=launcher.name,
                path=relocate_binary(binary, launcher.effective_output_directory(self._config)),
                platform=self._platform,
            )
            for launcher, binary in zip(launchers, binaries)
        ]
        logger.info(
            "Produced artifacts:\n %s", "\n ".join(str(artifact.path) for artifact in artifacts)
        )
        return artifacts

    def _compile_parallel(
        self,
        launchers: List[LauncherSpec],
        toolchain: CompilerInvocation,
        sources: GeneratedSources,
        token: CancelToken,
    ) -> List[Path]:
        with ThreadPoolExecutor(max_workers=self._config.jobs) as executor:
            futures: List[Future] = [
                executor.submit(self._compile_launcher, launcher, toolchain, sources, token)
                for launcher in launchers
            ]
            try:
                done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            except BaseException:
                # Interrupted while waiting, kill every running compiler before unwinding
                token.cancel()
                raise
            failed = [future for future in futures if future in done and future.exception()]
            if failed:
                token.cancel()
                wait(futures)

        if failed:
            primary = [f for f in failed if not isinstance(f.exception(), BuildCancelled)]
            raise (primary or failed)[0].exception()
        return [future.result() for future in futures]

    def _compile_launcher(
        self,
        launcher: LauncherSpec,
        toolchain: CompilerInvocation,
        sources: GeneratedSources,
        token: CancelToken,
    ) -> Path:
        """Compile and post-process one launcher. Returns the binary in the source directory."""
        config = self._config
        source_dir = sources.source_directory
        if token.cancelled:
            raise BuildCancelled([launcher.name])

        command = self.compile_command(toolchain, launcher)
        log_debug(logger, config.debug, "Compiling %s", launcher.name)
        self._runner.run(source_dir, command, config.timeout, config.debug, token)

        flip = self.subsystem_flip_command(launcher)
        if flip is not None:
            log_debug(logger, config.debug, "Changing %s to a non-console app.", flip[-1])
            self._runner.run(source_dir, flip, config.timeout, config.debug, token)

        return source_dir / self.output_name(launcher)


def build(
    launchers: Sequence[LauncherSpec],
    config: BuildConfig,
    platform: Optional[Platform] = None,
    cancel_token: Optional[CancelToken] = None,
    runner: Optional[ProcessRunner] = None,
) -> List[BuildArtifact]:
    """Build all launchers with a new :class:`BuildOrchestrator`. See
    :meth:`BuildOrchestrator.build`."""
    orchestrator = BuildOrchestrator(config, platform=platform, runner=runner)
    return orchestrator.build(launchers, cancel_token=cancel_token)

