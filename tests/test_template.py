from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from tron.errors import InvalidSyntaxError, MissingPlaceholderError
from tron.template import Template, extract_placeholders


class PlaceholderExtractionTests(unittest.TestCase):
    def test_collects_trimmed_distinct_names_in_order(self) -> None:
        template = Template("@[ b ]@ @[a]@ @[b]@ @[c]@")
        self.assertEqual(list(template.placeholders), ["b", "a", "c"])
        self.assertTrue(all(value == "" for value in template.placeholders.values()))

    def test_extraction_is_deterministic(self) -> None:
        text = "fn @[name]@() { @[body]@ } // @[name]@"
        self.assertEqual(set(Template(text).placeholders), set(Template(text).placeholders))
        self.assertEqual(extract_placeholders(text), ["name", "body"])

    def test_no_placeholders_is_valid(self) -> None:
        template = Template("plain text")
        self.assertEqual(dict(template.placeholders), {})
        self.assertEqual(template.render(), "plain text")

    def test_malformed_markers_are_ignored(self) -> None:
        template = Template("@[]@ and @[a] b plus @[ok]@ then @[unclosed")
        self.assertEqual(list(template.placeholders), ["ok"])

    def test_names_may_contain_any_character_but_bracket(self) -> None:
        template = Template("@[user.first-name!]@")
        self.assertIn("user.first-name!", template)

    def test_blank_name_is_declared_as_empty_string(self) -> None:
        template = Template("x @[   ]@ y")
        self.assertEqual(list(template.placeholders), [""])
        with self.assertRaises(MissingPlaceholderError) as ctx:
            template.render()
        self.assertEqual(ctx.exception.placeholder, "")
        template.set("", "v")
        self.assertEqual(template.render(), "x v y")

    def test_strict_mode_rejects_unterminated_marker(self) -> None:
        with self.assertRaises(InvalidSyntaxError):
            Template("value: @[name", strict=True)

    def test_strict_mode_rejects_blank_name(self) -> None:
        with self.assertRaises(InvalidSyntaxError):
            Template("value: @[   ]@", strict=True)

    def test_strict_mode_accepts_well_formed_text(self) -> None:
        template = Template("@[a]@ and @[ b ]@", strict=True)
        self.assertEqual(list(template.placeholders), ["a", "b"])


class BindingTests(unittest.TestCase):
    def test_set_rejects_undeclared_placeholder_without_mutation(self) -> None:
        template = Template("Hello @[name]@")
        with self.assertRaises(MissingPlaceholderError) as ctx:
            template.set("nmae", "Alice")
        self.assertEqual(ctx.exception.placeholder, "nmae")
        self.assertEqual(dict(template.placeholders), {"name": ""})

    def test_rebinding_keeps_last_value(self) -> None:
        template = Template("Hello @[name]@")
        template.set("name", "Alice")
        template.set("name", "Bob")
        self.assertEqual(template.placeholders["name"], "Bob")
        self.assertEqual(template.render(), "Hello Bob")

    def test_placeholder_mapping_is_read_only(self) -> None:
        template = Template("@[a]@")
        with self.assertRaises(TypeError):
            template.placeholders["b"] = "x"  # type: ignore[index]


class RenderTests(unittest.TestCase):
    def test_unbound_placeholder_blocks_render(self) -> None:
        template = Template("@[a]@-@[b]@")
        template.set("a", "1")
        with self.assertRaises(MissingPlaceholderError) as ctx:
            template.render()
        self.assertEqual(ctx.exception.placeholder, "b")

    def test_empty_string_counts_as_unbound(self) -> None:
        template = Template("@[a]@")
        template.set("a", "")
        with self.assertRaises(MissingPlaceholderError):
            template.render()
        self.assertEqual(template.unbound(), ["a"])

    def test_first_unbound_name_is_reported_in_appearance_order(self) -> None:
        template = Template("@[zeta]@ @[alpha]@")
        with self.assertRaises(MissingPlaceholderError) as ctx:
            template.render()
        self.assertEqual(ctx.exception.placeholder, "zeta")

    def test_render_replaces_every_marker_including_padded_ones(self) -> None:
        template = Template("@[x]@ + @[ x ]@ = @[y]@")
        template.set("x", "1")
        template.set("y", "2")
        self.assertEqual(template.render(), "1 + 1 = 2")

    def test_render_is_repeatable_and_does_not_rescan_values(self) -> None:
        template = Template("@[a]@ @[b]@")
        template.set("a", "@[b]@")
        template.set("b", "B")
        first = template.render()
        self.assertEqual(first, "@[b]@ B")
        self.assertEqual(template.render(), first)
        self.assertEqual(template.content, "@[a]@ @[b]@")

    def test_copy_is_independent(self) -> None:
        template = Template("@[a]@")
        template.set("a", "1")
        clone = template.copy()
        clone.set("a", "2")
        self.assertEqual(template.render(), "1")
        self.assertEqual(clone.render(), "2")


class FileLoadingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_from_file_records_path(self) -> None:
        path = self.root / "greeting.tpl"
        path.write_text("Hi @[who]@\n", encoding="utf-8")
        template = Template.from_file(path)
        self.assertEqual(template.path, path)
        template.set("who", "there")
        self.assertEqual(template.render(), "Hi there\n")

    def test_missing_file_raises_os_error(self) -> None:
        with self.assertRaises(FileNotFoundError):
            Template.from_file(self.root / "absent.tpl")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
