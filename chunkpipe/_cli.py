import io
import typing as ty
from contextlib import redirect_stdout

import click
from omegaconf import DictConfig, OmegaConf

from chunkpipe.chunks import ArrayChunks
from chunkpipe._version import version


DEFAULTS: ty.Dict[str, ty.Any] = {
    "size": 2,
    "separator": " ",
    "strict": False,
    "drop_remainder": False,
}


def load_config(
    config_path: ty.Optional[str], overrides: ty.Dict[str, ty.Any]
) -> DictConfig:
    """Merges the defaults, the config file at ``config_path``, and the
    options passed on the command line, in increasing precedence.
    """
    conf = OmegaConf.create(DEFAULTS)
    if config_path is not None:
        hide_stdout = io.StringIO()
        with redirect_stdout(hide_stdout):
            file_conf = OmegaConf.load(config_path)
        if not isinstance(file_conf, DictConfig):
            raise click.BadParameter(
                "Config file must contain a mapping.", param_hint="--config"
            )
        unknown = set(file_conf.keys()) - set(DEFAULTS)
        if unknown:
            raise click.BadParameter(
                f"Unknown keys {sorted(unknown)} in config file.",
                param_hint="--config",
            )
        conf = OmegaConf.merge(conf, file_conf)
    passed = {key: val for key, val in overrides.items() if val is not None}
    conf = OmegaConf.merge(conf, OmegaConf.create(passed))
    raw_size = conf.size
    if isinstance(raw_size, float) and not raw_size.is_integer():
        raise click.BadParameter(
            f"size must be a whole number, not {raw_size!r}.",
            param_hint="size",
        )
    try:
        size = int(raw_size)
    except (TypeError, ValueError, OverflowError):
        raise click.BadParameter(
            f"size must be an integer, not {raw_size!r}.", param_hint="size"
        ) from None
    if size < 1:
        raise click.BadParameter("size must be at least 1.", param_hint="size")
    conf.size = size
    return conf


def run(
    chunks: ArrayChunks[str],
    separator: str,
    strict: bool,
    drop_remainder: bool,
) -> ty.Tuple[int, int]:
    """Writes each group from ``chunks`` as a line of output, followed
    by the remainder. Returns the number of groups and left over items.
    """
    num_groups = 0
    for group in chunks:
        click.echo(separator.join(group))
        num_groups = num_groups + 1
    remainder = chunks.remainder
    if remainder and strict:
        raise click.ClickException(
            f"Input ended with {len(remainder)} lines left over, which do "
            f"not fill a group of {chunks.size}."
        )
    if remainder and not drop_remainder:
        click.echo(separator.join(remainder))
    return num_groups, len(remainder)


@click.command()
@click.argument("input", type=click.File("r"), default="-")
@click.option(
    "-n",
    "--size",
    type=int,
    default=None,
    help="Number of lines per group.",
)
@click.option(
    "-s",
    "--separator",
    default=None,
    help="String placed between the lines of a group.",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Fail if the input ends part way through a group.",
)
@click.option(
    "--drop-remainder/--keep-remainder",
    default=None,
    help="Omit the lines which do not fill a final group.",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file setting any of the options above.",
)
@click.option("-q", "--quiet", is_flag=True, help="Suppress the summary.")
@click.version_option(version, prog_name="chunkpipe")
def main(input, size, separator, strict, drop_remainder, config_path, quiet):
    """Groups the lines of INPUT into rows of a fixed size, one group
    per line of output. Reads stdin if INPUT is omitted.
    """
    conf = load_config(
        config_path,
        {
            "size": size,
            "separator": separator,
            "strict": strict,
            "drop_remainder": drop_remainder,
        },
    )
    lines = (line.rstrip("\n") for line in input)
    with ArrayChunks(lines, conf.size) as chunks:
        num_groups, num_left = run(
            chunks,
            separator=str(conf.separator),
            strict=bool(conf.strict),
            drop_remainder=bool(conf.drop_remainder),
        )
    if not quiet:
        summary = f"{num_groups} groups of {conf.size}"
        summary = click.style(summary, fg="green")
        click.echo(f"{summary}, {num_left} lines left over", err=True)
