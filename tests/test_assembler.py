from __future__ import annotations

import unittest

from tron.assembler import Assembler
from tron.errors import MissingPlaceholderError
from tron.handle import TemplateHandle
from tron.template import Template


def _handle(text: str, *dependencies: str) -> TemplateHandle:
    handle = TemplateHandle(Template(text))
    for dependency in dependencies:
        handle.with_dependency(dependency)
    return handle


class _RecordingHandle(TemplateHandle):
    def __init__(self, template: Template):
        super().__init__(template)
        self.render_calls = 0

    def render(self) -> str:
        self.render_calls += 1
        return super().render()


class AssemblerTests(unittest.TestCase):
    def test_render_all_concatenates_in_insertion_order(self) -> None:
        assembler = Assembler()
        assembler.add_template(_handle("a"))
        assembler.add_template(_handle("b"))
        self.assertEqual(assembler.render_all(), "a\nb\n")

    def test_empty_assembler_renders_empty_string(self) -> None:
        self.assertEqual(Assembler().render_all(), "")

    def test_set_global_skips_handles_without_placeholder(self) -> None:
        first = _handle("x=@[x]@")
        second = _handle("y=@[y]@")
        assembler = Assembler()
        assembler.add_template(first)
        assembler.add_template(second)

        assembler.set_global("x", "1")

        self.assertEqual(first.inner.placeholders["x"], "1")
        self.assertEqual(dict(second.inner.placeholders), {"y": ""})

    def test_set_global_binds_every_declaring_handle(self) -> None:
        assembler = Assembler()
        assembler.add_template(_handle("@[v]@-1"))
        assembler.add_template(_handle("@[v]@-2"))
        assembler.set_global("v", "z")
        self.assertEqual(assembler.render_all(), "z-1\nz-2\n")

    def test_set_ref_global_gives_each_target_its_own_copy(self) -> None:
        first = _handle("A(@[body]@)", "a")
        second = _handle("B(@[body]@)", "b")
        unrelated = _handle("C", "c")
        child = _handle("@[msg]@", "shared")
        child.set("msg", "hi")

        assembler = Assembler()
        for handle in (first, second, unrelated):
            assembler.add_template(handle)
        assembler.set_ref_global("body", child)

        self.assertEqual(assembler.render_all(), "A(hi)\nB(hi)\nC\n")
        self.assertEqual(first.dependencies, ("a", "shared"))
        self.assertEqual(second.dependencies, ("b", "shared"))
        self.assertEqual(unrelated.dependencies, ("c",))
        self.assertEqual(child.dependencies, ("shared",))
        self.assertEqual(assembler.dependencies(), ["a", "shared", "b", "shared", "c"])

    def test_set_ref_global_propagates_child_failure(self) -> None:
        assembler = Assembler()
        assembler.add_template(_handle("@[body]@"))
        with self.assertRaises(MissingPlaceholderError):
            assembler.set_ref_global("body", _handle("@[unbound]@"))

    def test_render_all_short_circuits_on_first_failure(self) -> None:
        failing = _handle("@[missing]@")
        later = _RecordingHandle(Template("b"))
        assembler = Assembler()
        assembler.add_template(failing)
        assembler.add_template(later)

        with self.assertRaises(MissingPlaceholderError) as ctx:
            assembler.render_all()
        self.assertEqual(ctx.exception.placeholder, "missing")
        self.assertEqual(later.render_calls, 0)

    def test_collection_protocol(self) -> None:
        assembler = Assembler()
        handle = _handle("a")
        assembler.add_template(handle)
        self.assertEqual(len(assembler), 1)
        self.assertEqual(list(assembler), [handle])
        self.assertEqual(assembler.templates, (handle,))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
