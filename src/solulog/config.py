"""Logger configuration and construction."""

import os
from collections.abc import Sequence
from dataclasses import dataclass, field

from solulog.adapters.sinks.console import ConsoleWriter
from solulog.adapters.sinks.file import RotatingFileWriter
from solulog.core.encoding.json_lines import DEFAULT_KEYS, EncoderKeys
from solulog.core.errors import ConfigurationError
from solulog.core.fanout import SinkFanout
from solulog.core.metrics import SinkMetrics
from solulog.core.models import CONFIGURABLE_LEVELS, Level, RotationPolicy
from solulog.core.ports import MetricsStoragePort, SinkPort
from solulog.core.sampling import Sampler
from solulog.logger import Logger


@dataclass(frozen=True)
class FileSinkConfig:
    """Rotating file sink settings.

    Attributes:
        filename: Active file name. An empty name disables the file sink.
        directory: Target directory; empty means the current directory.
        max_size: Size limit in bytes, 0 for unbounded.
        rotation: Calendar rotation policy or its lowercase name.
    """

    filename: str
    directory: str = ""
    max_size: int = 0
    rotation: RotationPolicy | str = RotationPolicy.NONE


@dataclass(frozen=True)
class SamplingConfig:
    """First-N per second, then every M-th record per message."""

    first: int
    thereafter: int = 0


@dataclass(frozen=True)
class LoggerConfig:
    """Options recognized when building a logger.

    Attributes:
        level: Minimum level: debug, info, warn, error or fatal.
        console: Write records to standard output.
        file: Rotating file sink settings.
        sampling: Sampling policy; None disables sampling.
        keys: Key names of the encoded records.
    """

    level: str = "info"
    console: bool = False
    file: FileSinkConfig | None = None
    sampling: SamplingConfig | None = None
    keys: EncoderKeys = field(default=DEFAULT_KEYS)


def parse_level(value: str) -> Level:
    """Map a configured level name to a Level.

    Raises:
        ConfigurationError: If the name is not a configurable level.
    """
    level = CONFIGURABLE_LEVELS.get(value.lower()) if isinstance(value, str) else None
    if level is None:
        allowed = ", ".join(CONFIGURABLE_LEVELS)
        raise ConfigurationError(f"invalid log level {value!r}; expected one of {allowed}")
    return level


def parse_rotation(value: RotationPolicy | str) -> RotationPolicy:
    """Map a rotation name to a RotationPolicy.

    Raises:
        ConfigurationError: If the name is unknown.
    """
    if isinstance(value, RotationPolicy):
        return value
    try:
        return RotationPolicy(str(value).lower())
    except ValueError:
        allowed = ", ".join(p.value for p in RotationPolicy)
        raise ConfigurationError(
            f"invalid rotation {value!r}; expected one of {allowed}"
        ) from None


def _build_file_sink(
    config: FileSinkConfig, metrics: SinkMetrics | None
) -> RotatingFileWriter:
    if config.max_size < 0:
        raise ConfigurationError(f"invalid max file size: {config.max_size}")
    rotation = parse_rotation(config.rotation)
    directory = config.directory or os.getcwd()
    return RotatingFileWriter(
        directory,
        config.filename,
        max_size=config.max_size,
        rotation=rotation,
        metrics=metrics,
    )


def build_logger(
    config: LoggerConfig,
    *,
    sinks: Sequence[SinkPort] = (),
    metrics: MetricsStoragePort | None = None,
) -> Logger:
    """Validate ``config`` and build a root logger.

    Sinks are registered file first, then console, then ``sinks``.

    Args:
        config: Logger options.
        sinks: Extra sinks appended after the configured ones.
        metrics: Storage receiving sink outcome counters.

    Raises:
        ConfigurationError: If the configuration is invalid or no sink is
            configured.
        OSError: If the file sink directory cannot be created.
    """
    level = parse_level(config.level)
    sampler = None
    if config.sampling is not None:
        if config.sampling.first <= 0:
            raise ConfigurationError(f"invalid sample first: {config.sampling.first}")
        if config.sampling.thereafter < 0:
            raise ConfigurationError(
                f"invalid sample thereafter: {config.sampling.thereafter}"
            )
        sampler = Sampler(config.sampling.first, config.sampling.thereafter)
    file_config = config.file if config.file is not None and config.file.filename else None
    if file_config is None and not config.console and not sinks:
        raise ConfigurationError("no output sink configured")

    recorder = SinkMetrics(metrics) if metrics is not None else None
    built: list[SinkPort] = []
    if file_config is not None:
        built.append(_build_file_sink(file_config, recorder))
    if config.console:
        built.append(ConsoleWriter(metrics=recorder))
    built.extend(sinks)
    fanout = SinkFanout(built, level=level, sampler=sampler, keys=config.keys)
    return Logger(fanout)
