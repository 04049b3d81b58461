"""Record types for GraphQL input objects.

Input objects may reference themselves, directly or through other input
objects. A reference that is not already behind a list has to be boxed
(emitted as a forward reference) when it closes such a cycle.
"""

from .ir import GqlInput, GqlObjectField
from .naming import type_name
from .query_context import QueryContext, make_fields
from .units import Constructor, StructDefinition, TargetType


def strongly_connected_components(graph: dict[str, list[str]]) -> dict[str, int]:
    """Map every node to the id of its strongly connected component.

    Iterative Tarjan; every successor must also be a key of ``graph``.
    """
    index: dict[str, int] = {}
    low: dict[str, int] = {}
    stack: list[str] = []
    on_stack: set[str] = set()
    component: dict[str, int] = {}
    counter = 0
    next_component = 0

    for root in sorted(graph):
        if root in index:
            continue
        index[root] = low[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)
        work = [(root, iter(graph[root]))]

        while work:
            node, successors = work[-1]
            descended = False
            for succ in successors:
                if succ not in index:
                    index[succ] = low[succ] = counter
                    counter += 1
                    stack.append(succ)
                    on_stack.add(succ)
                    work.append((succ, iter(graph[succ])))
                    descended = True
                    break
                if succ in on_stack:
                    low[node] = min(low[node], index[succ])
            if descended:
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                low[parent] = min(low[parent], low[node])
            if low[node] == index[node]:
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component[member] = next_component
                    if member == node:
                        break
                next_component += 1

    return component


class InputEmitter:
    """Turns schema input objects into record definitions."""

    def __init__(self, context: QueryContext):
        self.context = context
        self._components: dict[str, int] | None = None
        self._cyclic: set[str] = set()

    def _direct_input_edges(self) -> dict[str, list[str]]:
        """Input object -> input objects it contains without indirection."""
        inputs = self.context.schema.inputs
        graph = {}
        for name, gql_input in inputs.items():
            graph[name] = sorted({
                f.type.inner_name_str()
                for f in gql_input.fields.values()
                if not f.type.is_indirected() and f.type.inner_name_str() in inputs
            })
        return graph

    def _analyze(self) -> dict[str, int]:
        if self._components is None:
            graph = self._direct_input_edges()
            components = strongly_connected_components(graph)
            sizes: dict[int, int] = {}
            for component in components.values():
                sizes[component] = sizes.get(component, 0) + 1
            # A single-node component is only a cycle with a direct self-reference
            self._cyclic = {
                name for name, component in components.items()
                if sizes[component] > 1 or name in graph[name]
            }
            self._components = components
        return self._components

    def contains_type_without_indirection(self, owner: str, type_name: str) -> bool:
        """True if ``owner`` reaches ``type_name`` and back without passing a list."""
        components = self._analyze()
        if owner not in self._cyclic or type_name not in components:
            return False
        return components[owner] == components[type_name]

    def is_recursive_without_indirection(self, type_name: str) -> bool:
        return self.contains_type_without_indirection(type_name, type_name)

    def needs_box(self, owner: str, field: GqlObjectField) -> bool:
        """True if this field closes a cycle of non-indirected input references."""
        if field.type.is_indirected():
            return False
        target = field.type.inner_name_str()
        if target not in self.context.schema.inputs:
            return False
        return self.contains_type_without_indirection(owner, target)

    def field_spec(self, owner: GqlInput, field: GqlObjectField) -> tuple[str, TargetType, None]:
        target = field.type.to_target_type(self.context)
        if self.needs_box(owner.name, field):
            target = target.boxed()
        self.context.schema.require(field.type.inner_name_str())
        return field.name, target, None

    def to_struct(self, gql_input: GqlInput) -> StructDefinition:
        """Record type plus a constructor over the required fields."""
        fields = make_fields(
            self.field_spec(gql_input, field)
            for field in sorted(gql_input.fields.values(), key=lambda f: f.name)
        )
        return StructDefinition(
            name=type_name(gql_input.name),
            fields=fields,
            bases=self.context.variables_derives(),
            description=gql_input.description,
            constructor=Constructor(params=[f for f in fields if not f.optional]),
        )
