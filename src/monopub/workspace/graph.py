"""Dependency graph of workspace packages.

Edges point from a dependent to its dependency: if ``a`` lists ``b`` in its
dependencies or devDependencies, the graph holds ``a -> b``. References to
names outside the workspace are external and ignored.

Every ordering query is stable: packages that are not constrained relative
to each other keep their discovery order.
"""

from __future__ import annotations

import heapq
from collections.abc import Iterable, Iterator

from monopub.errors import CyclicDependencyError, PackageNotFoundError
from monopub.workspace.package import Package


class DependencyGraph:
    """Directed acyclic graph of local package dependencies.

    Attributes:
        packages: Packages keyed by name, in discovery order.
    """

    def __init__(self, packages: Iterable[Package]) -> None:
        """Build the graph.

        Args:
            packages: Packages in discovery order, with unique names.

        Raises:
            CyclicDependencyError: If local packages form a cycle, including a
                package that depends on itself.
        """
        self.packages: dict[str, Package] = {p.name: p for p in packages}
        self._index = {name: i for i, name in enumerate(self.packages)}
        self._edges: dict[str, list[str]] = {}
        self._reverse: dict[str, list[str]] = {name: [] for name in self.packages}

        for pkg in self.packages.values():
            deps = pkg.local_dependency_names(self.packages)
            if pkg.name in deps:
                raise CyclicDependencyError([pkg.name, pkg.name])
            self._edges[pkg.name] = deps
            for dep in deps:
                self._reverse[dep].append(pkg.name)

        for dependents in self._reverse.values():
            dependents.sort(key=self._index.__getitem__)

        cycle = self.find_cycle()
        if cycle:
            raise CyclicDependencyError(cycle)

    def __len__(self) -> int:
        return len(self.packages)

    def __contains__(self, name: object) -> bool:
        return name in self.packages

    def _require(self, name: str) -> None:
        if name not in self.packages:
            raise PackageNotFoundError(name)

    def _ordered(self, names: Iterable[str]) -> list[Package]:
        return [self.packages[n] for n in sorted(set(names), key=self._index.__getitem__)]

    def find_cycle(self) -> list[str] | None:
        """Find one dependency cycle.

        Returns:
            Cycle members in edge order, closing on the first member
            (``["a", "b", "a"]``), or None if the graph is acyclic.
        """
        white, gray, black = 0, 1, 2
        color = dict.fromkeys(self.packages, white)

        for start in self.packages:
            if color[start] != white:
                continue
            stack: list[tuple[str, Iterator[str]]] = [(start, iter(self._edges[start]))]
            path = [start]
            color[start] = gray
            while stack:
                node, children = stack[-1]
                child = next(children, None)
                if child is None:
                    color[node] = black
                    stack.pop()
                    path.pop()
                elif color[child] == gray:
                    return path[path.index(child) :] + [child]
                elif color[child] == white:
                    color[child] = gray
                    path.append(child)
                    stack.append((child, iter(self._edges[child])))
        return None

    def get_dependencies(self, name: str) -> list[Package]:
        """Direct local dependencies of a package."""
        self._require(name)
        return self._ordered(self._edges[name])

    def get_dependents(self, name: str) -> list[Package]:
        """Packages that directly depend on a package."""
        self._require(name)
        return self._ordered(self._reverse[name])

    def _walk(self, name: str, adjacency: dict[str, list[str]]) -> set[str]:
        seen: set[str] = set()
        pending = list(adjacency[name])
        while pending:
            current = pending.pop()
            if current in seen:
                continue
            seen.add(current)
            pending.extend(adjacency[current])
        return seen

    def get_transitive_dependencies(self, name: str) -> list[Package]:
        """Every local package reachable by following dependency edges."""
        self._require(name)
        return self._ordered(self._walk(name, self._edges))

    def get_transitive_dependents(self, name: str) -> list[Package]:
        """Every local package that depends on ``name`` directly or indirectly."""
        self._require(name)
        return self._ordered(self._walk(name, self._reverse))

    def get_affected(self, names: Iterable[str]) -> list[Package]:
        """The given packages plus everything that transitively depends on them."""
        affected: set[str] = set()
        for name in names:
            self._require(name)
            affected.add(name)
            affected.update(self._walk(name, self._reverse))
        return self._ordered(affected)

    def _constraints(self, names: Iterable[str] | None) -> dict[str, set[str]]:
        """Map each selected package to the selected packages it must follow.

        Constraints are transitive so that ordering survives packages left
        out of the selection (``a -> hidden -> b`` still puts ``b`` first).
        """
        selected = list(self.packages) if names is None else list(dict.fromkeys(names))
        for name in selected:
            self._require(name)
        subset = set(selected)
        return {name: self._walk(name, self._edges) & subset for name in selected}

    def topological_order(self, names: Iterable[str] | None = None) -> list[Package]:
        """Order packages so that dependencies come before dependents.

        Args:
            names: Restrict to these packages (default: all).

        Returns:
            Packages in dependency order; ties keep discovery order.
        """
        constraints = self._constraints(names)
        waiting = {name: len(deps) for name, deps in constraints.items()}
        followers: dict[str, list[str]] = {name: [] for name in constraints}
        for name, deps in constraints.items():
            for dep in deps:
                followers[dep].append(name)

        ready = [(self._index[n], n) for n, count in waiting.items() if count == 0]
        heapq.heapify(ready)
        order: list[Package] = []

        while ready:
            _, name = heapq.heappop(ready)
            order.append(self.packages[name])
            for follower in followers[name]:
                waiting[follower] -= 1
                if waiting[follower] == 0:
                    heapq.heappush(ready, (self._index[follower], follower))

        return order

    def parallel_batches(self, names: Iterable[str] | None = None) -> Iterator[list[Package]]:
        """Group packages into batches that can run concurrently.

        Each batch only depends on packages from earlier batches.

        Args:
            names: Restrict to these packages (default: all).

        Yields:
            Lists of packages in discovery order.
        """
        constraints = self._constraints(names)
        done: set[str] = set()
        remaining = [p.name for p in self._ordered(constraints)]

        while remaining:
            batch = [n for n in remaining if constraints[n] <= done]
            done.update(batch)
            remaining = [n for n in remaining if n not in done]
            yield [self.packages[n] for n in batch]
