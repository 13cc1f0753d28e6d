"""
Visualization tools for blockminmax.

This module renders gridded ``x y z`` results as images: triplets are placed
back onto the lattice of their region and drawn with a white-to-green colour
scale. Several results can share one z range so their images are directly
comparable.
"""

import os
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.colors as mcolors

from blockminmax import io
from blockminmax.grid import Region, compute_lattice, make_region, parse_region

GREEN_CMAP = mcolors.LinearSegmentedColormap.from_list("white_green", ["white", "green"])

RegionLike = Union[str, Region, Sequence[float]]


def _as_region(region: RegionLike) -> Region:
    if isinstance(region, str):
        return parse_region(region)
    return make_region(*region)


def load_triplets(filepath: str) -> np.ndarray:
    """
    Load an ``x y z`` file into an array.

    Args:
        filepath: Path to a gridded output (or any point file)

    Returns:
        Array of shape (N, 3)
    """
    with io.open_input(filepath) as f:
        rows = [record[:3] for record in io.iter_records(f)]
    return np.array(rows, dtype=np.float64).reshape(-1, 3)


def triplets_to_grid(triplets: Union[np.ndarray, Iterable[Tuple[float, float, float]]],
                     region: RegionLike,
                     inc: float) -> np.ndarray:
    """
    Place triplets onto the lattice of a region.

    Args:
        triplets: Array of shape (N, 3) or iterable of ``(x, y, z)``
        region: Region as Region, sequence or ``xmin/xmax/ymin/ymax`` string
        inc: Grid spacing

    Returns:
        Array of shape (ny, nx); row 0 is ``ymin``; cells without a triplet are NaN
    """
    region = _as_region(region)
    lattice = compute_lattice(region, inc)
    if not isinstance(triplets, np.ndarray):
        triplets = list(triplets)
    triplets = np.asarray(triplets, dtype=np.float64).reshape(-1, 3)

    grid = np.full((lattice.ny, lattice.nx), np.nan)

    # Triplets sit on nodes, so plain rounding recovers the indices
    ix = np.rint((triplets[:, 0] - region.xmin) / inc).astype(np.int64)
    iy = np.rint((triplets[:, 1] - region.ymin) / inc).astype(np.int64)
    inside = (ix >= 0) & (ix < lattice.nx) & (iy >= 0) & (iy < lattice.ny)

    grid[iy[inside], ix[inside]] = triplets[inside, 2]
    return grid


def common_z_range(*grids: np.ndarray) -> Tuple[float, float]:
    """
    Return the z range spanned by all finite values of several grids.

    Returns:
        ``(zmin, zmax)``; ``(0.0, 1.0)`` if no grid holds data
    """
    values = [g[np.isfinite(g)] for g in grids]
    values = [v for v in values if v.size]
    if not values:
        return 0.0, 1.0

    zmin = float(min(v.min() for v in values))
    zmax = float(max(v.max() for v in values))
    if zmin == zmax:
        zmin, zmax = zmin - 0.5, zmax + 0.5
    return zmin, zmax


def plot_lattice(grid: np.ndarray,
                 region: RegionLike,
                 inc: float,
                 zrange: Optional[Tuple[float, float]] = None,
                 ax: Optional[plt.Axes] = None,
                 cmap: Union[str, mcolors.Colormap] = GREEN_CMAP,
                 title: str = '',
                 show_colorbar: bool = True,
                 figsize: Tuple[int, int] = (8, 6)) -> plt.Figure:
    """
    Plot a gridded result.

    Args:
        grid: Array of shape (ny, nx) as returned by triplets_to_grid
        region: Region of the grid
        inc: Grid spacing
        zrange: Optional ``(zmin, zmax)`` colour scale limits
        ax: Optional matplotlib axes to plot on
        cmap: Colormap to use
        title: Title for the plot
        show_colorbar: Whether to show a colorbar
        figsize: Figure size

    Returns:
        Matplotlib figure
    """
    region = _as_region(region)
    if zrange is None:
        zrange = common_z_range(grid)

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    # Nodes are cell centres in the image
    half = inc / 2
    extent = [region.xmin - half, region.xmax + half,
              region.ymin - half, region.ymax + half]

    im = ax.imshow(
        np.ma.masked_invalid(grid),
        cmap=cmap,
        origin='lower',
        extent=extent,
        vmin=zrange[0],
        vmax=zrange[1],
        interpolation='nearest'
    )

    if show_colorbar:
        plt.colorbar(im, ax=ax, label='z')

    ax.set_title(title)
    ax.set_xlabel('X')
    ax.set_ylabel('Y')

    return fig


def save_figure(fig: plt.Figure, filepath: str, dpi: int = 200) -> None:
    """
    Save a figure to file and close it.

    Args:
        fig: Figure to save
        filepath: Output image path
        dpi: Resolution in dots per inch
    """
    os.makedirs(os.path.dirname(os.path.abspath(filepath)), exist_ok=True)
    fig.savefig(filepath, dpi=dpi, bbox_inches='tight')
    plt.close(fig)


def plot_files(filepaths: Sequence[str],
               region: RegionLike,
               inc: float,
               suffix: str = ".png") -> List[str]:
    """
    Render several output files with a common colour scale.

    Args:
        filepaths: Gridded output files
        region: Region shared by the files
        inc: Grid spacing shared by the files
        suffix: Appended to each input path to form the image path

    Returns:
        Paths of the written images
    """
    grids = [triplets_to_grid(load_triplets(p), region, inc) for p in filepaths]
    zrange = common_z_range(*grids)

    written = []
    for path, grid in zip(filepaths, grids):
        image_path = path + suffix
        fig = plot_lattice(grid, region, inc, zrange=zrange, title=os.path.basename(path))
        save_figure(fig, image_path)
        written.append(image_path)
    return written
