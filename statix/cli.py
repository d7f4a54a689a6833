"""CLI interface for Statix type inference."""

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from statix import EXT_CLUSTERS, EXT_NETWORK, __version__
from statix.clustering import ClusteringOptions
from statix.settings import get_links_cut, get_scale, get_use_rich
from statix.significance import EmptyDatasetError, update_file_extension

# Load environment variables from .env file
load_dotenv(override=True)

# Configure logging
logger = logging.getLogger(__name__)

REDUCTION_CHOICES = ["none", "accurate", "mean", "severe"]


def _configure_logging(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger().setLevel(getattr(logging, log_level))


_DATASET_OPTIONS = [
    click.argument(
        "dataset", type=click.Path(exists=True, dir_okay=False, path_type=Path)
    ),
    click.option(
        "--hints",
        type=str,
        default=None,
        help=(
            "Property significance hints: hints file name, '--' to evaluate the "
            "heavy head interactively, '-[<marks>]' to learn it from the dataset "
            "types with the optional rounding granularity, e.g. --hints=-10"
        ),
    ),
    click.option(
        "--labeled",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="Labeled dataset to learn all the property weights from",
    ),
    click.option(
        "--filter-untyped",
        "-f",
        is_flag=True,
        help="Filter out the untyped instances from the results",
    ),
    click.option(
        "--id-map",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Output the mapping of the instance ids to their names",
    ),
    click.option(
        "--dirty",
        is_flag=True,
        help="The labeled data might contain duplicated triples to be omitted",
    ),
    click.option(
        "--weigh-node",
        is_flag=True,
        help="Weigh nodes (node self-weight) besides their links",
    ),
    click.option(
        "--jaccard",
        is_flag=True,
        help="Use the weighted Jaccard instead of the cosine similarity",
    ),
    click.option(
        "--links-cut",
        type=click.FloatRange(0, 1, max_open=True),
        default=get_links_cut,
        show_default="0, env: STATIX_LINKS_CUT",
        help="Links cutting ratio E [0, 1), 0 means skip the cutting",
    ),
    click.option(
        "--log-level",
        default="INFO",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
        help="Set the logging level",
    ),
    click.option(
        "--no-rich",
        is_flag=True,
        help="Disable rich progress output",
    ),
]


def dataset_options(func):
    """Options shared by the commands loading the dataset and forming the graph."""
    for option in reversed(_DATASET_OPTIONS):
        func = option(func)
    return func


def _load(statix, dataset, hints, labeled, filter_untyped, id_map, dirty) -> None:
    """Load the dataset applying the hints or the labeled dataset."""
    if hints is not None and labeled is not None:
        raise click.UsageError("--hints and --labeled are mutually exclusive")
    if labeled is not None:
        statix.load_datasets(dataset, labeled, filter_untyped, id_map, dirty)
    else:
        statix.load_dataset(dataset, filter_untyped, id_map, hints, dirty)


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    help="Show the statix version and exit.",
)
@click.pass_context
def main(ctx: click.Context, version: bool) -> None:
    """Statix - statistical type inference for RDF-like datasets.

    \b
      statix cluster DATASET   Infer types (clusters) of the dataset instances
      statix network DATASET   Save the clustering input network
    """
    if version:
        click.echo(__version__)
        ctx.exit()

    # If no subcommand, show help
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command("cluster")
@dataset_options
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Clusters file, the dataset name with {EXT_CLUSTERS} extension by default",
)
@click.option(
    "--scale",
    type=click.FloatRange(min=0, min_open=True),
    default=get_scale,
    show_default="1, env: STATIX_SCALE",
    help="Clustering resolution, larger values form finer clusters",
)
@click.option(
    "--multilevel",
    is_flag=True,
    help="Output clusters of all hierarchy levels instead of a single level",
)
@click.option(
    "--reduction",
    type=click.Choice(REDUCTION_CHOICES),
    default="none",
    help="Links reduction policy applied before the clustering",
)
@click.option(
    "--reduce-by-weight",
    is_flag=True,
    help="Reduce links by a global weight quantile instead of per node",
)
@click.pass_context
def cluster(
    ctx: click.Context,
    dataset: Path,
    hints: str | None,
    labeled: Path | None,
    filter_untyped: bool,
    id_map: Path | None,
    dirty: bool,
    weigh_node: bool,
    jaccard: bool,
    links_cut: float,
    log_level: str,
    no_rich: bool,
    output: Path | None,
    scale: float,
    multilevel: bool,
    reduction: str,
    reduce_by_weight: bool,
) -> None:
    """Infer types of the dataset instances.

    Examples:
        # Infer types with the frequency based property weights
        statix cluster data.nt

        # Evaluate the heavy head of the properties interactively
        statix cluster data.nt --hints=--

        # Cut links and output all hierarchy levels
        statix cluster data.nt --links-cut 0.5 --multilevel -o types.cnl
    """
    _configure_logging(log_level)
    from statix.pipeline import Statix

    output = output or Path(update_file_extension(dataset, EXT_CLUSTERS))
    options = ClusteringOptions(
        scale=scale,
        multilevel=multilevel,
        reduction=reduction,
        reduce_by_weight=reduce_by_weight,
        filter_members=filter_untyped,
    )
    statix = Statix(use_rich=not no_rich and get_use_rich())
    try:
        _load(statix, dataset, hints, labeled, filter_untyped, id_map, dirty)
        statix.cluster(output, options, weigh_node, jaccard, links_cut)
    except EmptyDatasetError as e:
        logger.warning(str(e))
        ctx.exit(0)
    except (OSError, ValueError) as e:
        raise click.ClickException(str(e)) from e


@main.command("network")
@dataset_options
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Network file, the dataset name with {EXT_NETWORK} extension by default",
)
@click.pass_context
def network(
    ctx: click.Context,
    dataset: Path,
    hints: str | None,
    labeled: Path | None,
    filter_untyped: bool,
    id_map: Path | None,
    dirty: bool,
    weigh_node: bool,
    jaccard: bool,
    links_cut: float,
    log_level: str,
    no_rich: bool,
    output: Path | None,
) -> None:
    """Save the clustering input network of the dataset.

    Examples:
        statix network data.nt
        statix network data.nt --hints data.ipl --links-cut 0.3 -o data.rcg
    """
    _configure_logging(log_level)
    from statix.pipeline import Statix

    output = output or Path(update_file_extension(dataset, EXT_NETWORK))
    statix = Statix(use_rich=not no_rich and get_use_rich())
    try:
        _load(statix, dataset, hints, labeled, filter_untyped, id_map, dirty)
        statix.save_net(output, weigh_node, jaccard, links_cut)
    except EmptyDatasetError as e:
        logger.warning(str(e))
        ctx.exit(0)
    except (OSError, ValueError) as e:
        raise click.ClickException(str(e)) from e
