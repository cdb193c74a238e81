from __future__ import annotations

import warnings
from typing import Any

import matplotlib.pyplot as plt
import networkx as nx

from acequia.allocation import AllocationConfig
from acequia.edge import Canal
from acequia.node import Region

ROLE_COLORS: dict[str, str] = {
    "short": "#e74c3c",
    "donor": "#27ae60",
    "balanced": "#3498db",
}

ROLE_LABELS: dict[str, str] = {
    "short": "Short of need",
    "donor": "Donor",
    "balanced": "Balanced",
}

OPEN_CANAL_COLOR = "#2980b9"
CLOSED_CANAL_COLOR = "#cccccc"


def region_role(region: Region, config: AllocationConfig) -> str:
    if region.deficit > config.epsilon:
        return "short"
    if region.safe_surplus(config.safety_margin) > config.epsilon:
        return "donor"
    return "balanced"


def visualize_system(
    regions: dict[str, Region],
    canals: dict[str, Canal],
    *,
    config: AllocationConfig | None = None,
    figsize: tuple[float, float] = (12, 8),
    title: str | None = None,
) -> tuple[plt.Figure, plt.Axes]:
    if not regions:
        raise ValueError("System has no regions. Cannot visualize.")
    if config is None:
        config = AllocationConfig()

    graph = _build_graph(regions, canals)
    pos = _compute_positions(graph, regions)

    fig, ax = plt.subplots(figsize=figsize)

    handles = _draw_regions(graph, pos, regions, config, ax)
    _draw_canals(graph, pos, canals, ax)
    nx.draw_networkx_labels(graph, pos, ax=ax, font_size=9, font_weight="bold")

    if title is not None:
        ax.set_title(title)
    else:
        n_open = sum(1 for c in canals.values() if c.is_open)
        ax.set_title(f"Acequia ({len(regions)} regions, {len(canals)} canals, {n_open} open)")

    ax.legend(handles=handles, loc="best")
    ax.set_axis_off()
    plt.tight_layout()

    return fig, ax


def _build_graph(regions: dict[str, Region], canals: dict[str, Canal]) -> nx.DiGraph:
    graph = nx.DiGraph()
    graph.add_nodes_from(regions)
    for canal in canals.values():
        if canal.source in regions and canal.target in regions:
            graph.add_edge(canal.source, canal.target)
    return graph


def _compute_positions(graph: nx.DiGraph, regions: dict[str, Region]) -> dict[str, Any]:
    located: dict[str, tuple[float, float]] = {
        rid: (region.location[1], region.location[0]) for rid, region in regions.items() if region.location is not None
    }

    if len(located) == len(regions):
        return located

    if not located:
        warnings.warn(
            "No regions have locations; using automatic layout.",
            stacklevel=3,
        )
        return nx.spring_layout(graph, seed=0)

    return nx.spring_layout(graph, pos=located, fixed=list(located.keys()))


def _draw_regions(
    graph: nx.DiGraph,
    pos: dict[str, Any],
    regions: dict[str, Region],
    config: AllocationConfig,
    ax: plt.Axes,
) -> list[Any]:
    groups: dict[str, list[str]] = {}
    for rid, region in regions.items():
        groups.setdefault(region_role(region, config), []).append(rid)

    handles: list[Any] = []
    for role, ids in groups.items():
        collection = nx.draw_networkx_nodes(
            graph,
            pos,
            nodelist=ids,
            node_color=ROLE_COLORS[role],
            node_size=600,
            label=ROLE_LABELS[role],
            ax=ax,
        )
        handles.append(collection)
    return handles


def _split_pairs(canals: dict[str, Canal]) -> tuple[list[tuple[str, str]], list[tuple[str, str]]]:
    """Region pairs with at least one closed canal, and with at least one open canal.

    Parallel canals share a pair, so a pair can appear in both lists.
    """
    closed: dict[tuple[str, str], None] = {}
    opened: dict[tuple[str, str], None] = {}
    for canal in canals.values():
        pairs = opened if canal.is_open else closed
        pairs[(canal.source, canal.target)] = None
    return list(closed), list(opened)


def _draw_canals(graph: nx.DiGraph, pos: dict[str, Any], canals: dict[str, Canal], ax: plt.Axes) -> None:
    closed, opened = _split_pairs(canals)
    closed = [e for e in closed if graph.has_edge(*e)]
    opened = [e for e in opened if graph.has_edge(*e)]

    if closed:
        nx.draw_networkx_edges(
            graph,
            pos,
            edgelist=closed,
            ax=ax,
            edge_color=CLOSED_CANAL_COLOR,
            arrows=True,
            arrowsize=15,
            width=1.5,
        )
    if opened:
        # curved over the straight closed edge of any parallel sibling
        nx.draw_networkx_edges(
            graph,
            pos,
            edgelist=opened,
            ax=ax,
            edge_color=OPEN_CANAL_COLOR,
            arrows=True,
            arrowsize=15,
            width=2.5,
            connectionstyle="arc3,rad=0.2",
        )
        rates: dict[tuple[str, str], float] = {}
        for c in canals.values():
            if c.is_open:
                key = (c.source, c.target)
                rates[key] = rates.get(key, 0.0) + c.flow_rate
        labels = {pair: f"{rate:.3g} m³/s" for pair, rate in rates.items() if pair in graph.edges}
        nx.draw_networkx_edge_labels(graph, pos, edge_labels=labels, ax=ax, font_color=OPEN_CANAL_COLOR, font_size=8)
