from typing import Iterable
import networkx as nx

from .models import Slot

def _bump(G: nx.Graph, u, v):
    if G.has_edge(u, v):
        G[u][v]['count'] += 1
    else:
        G.add_edge(u, v, count=1)

def build_team_meeting_graph(slots: Iterable[Slot]) -> nx.Graph:
    """Teams as nodes; edge `count` = number of slots the two teams shared."""
    G = nx.Graph()
    for slot in slots:
        teams = slot.team_ids
        G.add_nodes_from(teams)
        for i in range(len(teams)):
            for j in range(i + 1, len(teams)):
                _bump(G, teams[i], teams[j])
    return G

def build_team_jury_graph(slots: Iterable[Slot]) -> nx.Graph:
    """Bipartite graph of ('team', id) and ('jury', id) nodes with `count` edges."""
    G = nx.Graph()
    for slot in slots:
        for t in slot.team_ids:
            G.add_node(('team', t), bipartite=0)
            for j in slot.jury_ids:
                G.add_node(('jury', j), bipartite=1)
                _bump(G, ('team', t), ('jury', j))
    return G

def repeat_count(G: nx.Graph) -> int:
    return sum(max(0, c - 1) for _, _, c in G.edges(data='count'))
