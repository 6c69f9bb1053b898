"""Unit tests for the relationship categories and the union query."""

import unittest

from sqlglot import exp

from omoprel.core.base import Direction, RelCategory
from omoprel.core.errors import InvalidArgument
from omoprel.core.helpers import is_single_statement, parse_sql
from omoprel.core.registry import get_all_categories, get_category, list_categories
from omoprel.queries import build_relationship_query
from omoprel.queries.relationships import build_seed_cte
from omoprel.queries.relationships.hierarchy import DescendantCategory
from omoprel.schemas import RELATIONSHIP_COLUMNS, get_table_columns

SCHEMA = "cdm"

CTE_NAMES = ["descendants", "ancestors", "cr_out", "cr_in", "syn"]


def _parse(body: str) -> exp.Select:
    """Parse one category body on its own; seed reads as a plain table."""
    trees, error = parse_sql(body)
    assert error is None, error
    return trees[0]


def _category_tree(cte_name: str, only_standard: bool = True, only_direct: bool = False) -> exp.Select:
    body = get_category(cte_name)().build(SCHEMA, only_standard=only_standard, only_direct=only_direct)
    return _parse(body)


def _where(tree: exp.Select) -> str:
    where = tree.args.get("where")
    return where.sql() if where else ""


class RegistryTests(unittest.TestCase):
    """Tests for the category registry."""

    def test_all_categories_in_union_order(self) -> None:
        self.assertEqual([c.cte_name for c in get_all_categories()], CTE_NAMES)

    def test_category_metadata(self) -> None:
        expected = {
            "descendants": (RelCategory.HIERARCHY_DESCENDANT, Direction.DESCENDANT_OF),
            "ancestors": (RelCategory.HIERARCHY_ANCESTOR, Direction.ANCESTOR_OF),
            "cr_out": (RelCategory.RELATIONSHIP, Direction.OUTGOING),
            "cr_in": (RelCategory.RELATIONSHIP, Direction.INCOMING),
            "syn": (RelCategory.SYNONYM, Direction.SYNONYM_OF_SEED),
        }
        for cte_name, (category, direction) in expected.items():
            cls = get_category(cte_name)
            self.assertEqual(cls.rel_category, category)
            self.assertEqual(cls.direction, direction)

    def test_unknown_category(self) -> None:
        with self.assertRaises(InvalidArgument):
            get_category("siblings")

    def test_list_categories(self) -> None:
        self.assertEqual(sorted(list_categories()), sorted(CTE_NAMES))


class CategoryTests(unittest.TestCase):
    """Each category body parses and filters on its own."""

    def test_every_category_emits_relationship_columns(self) -> None:
        for cte_name in CTE_NAMES:
            tree = _category_tree(cte_name)
            self.assertEqual(tuple(tree.named_selects), RELATIONSHIP_COLUMNS, cte_name)

    def test_category_literals(self) -> None:
        for cte_name in CTE_NAMES:
            cls = get_category(cte_name)
            body = cls().build(SCHEMA)
            self.assertIn(f"'{cls.rel_category.value}'", body)
            self.assertIn(f"'{cls.direction.value}'", body)

    def test_referenced_vocabulary_columns_exist(self) -> None:
        known = {
            "ca": get_table_columns("concept_ancestor"),
            "cr": get_table_columns("concept_relationship"),
            "cs": get_table_columns("concept_synonym"),
            "rc": get_table_columns("concept"),
            "s": get_table_columns("concept"),
        }
        for cte_name in CTE_NAMES:
            tree = _category_tree(cte_name)
            for column in tree.find_all(exp.Column):
                self.assertIn(column.name, known[column.table], f"{cte_name}: {column.sql()}")

    def test_descendant_join_direction(self) -> None:
        body = get_category("descendants")().build(SCHEMA)
        self.assertIn("ON ca.ancestor_concept_id = s.concept_id", body)
        self.assertIn("ON rc.concept_id = ca.descendant_concept_id", body)

    def test_ancestor_join_direction(self) -> None:
        body = get_category("ancestors")().build(SCHEMA)
        self.assertIn("ON ca.descendant_concept_id = s.concept_id", body)
        self.assertIn("ON rc.concept_id = ca.ancestor_concept_id", body)

    def test_relationship_join_directions(self) -> None:
        outgoing = get_category("cr_out")().build(SCHEMA)
        self.assertIn("ON cr.concept_id_1 = s.concept_id", outgoing)
        self.assertIn("ON rc.concept_id = cr.concept_id_2", outgoing)
        incoming = get_category("cr_in")().build(SCHEMA)
        self.assertIn("ON cr.concept_id_2 = s.concept_id", incoming)
        self.assertIn("ON rc.concept_id = cr.concept_id_1", incoming)

    def test_hierarchy_and_relationship_exclusions(self) -> None:
        for cte_name in ["descendants", "ancestors", "cr_out", "cr_in"]:
            where = _where(_category_tree(cte_name, only_standard=False))
            self.assertIn("s.concept_id <> rc.concept_id", where, cte_name)
            self.assertIn("rc.invalid_reason IS NULL", where, cte_name)
            self.assertNotIn("standard_concept", where, cte_name)

    def test_relationships_must_be_active(self) -> None:
        for cte_name in ["cr_out", "cr_in"]:
            where = _where(_category_tree(cte_name))
            self.assertIn("cr.invalid_reason IS NULL", where)
            self.assertIn("CURRENT_DATE BETWEEN cr.valid_start_date AND cr.valid_end_date", where)

    def test_only_standard(self) -> None:
        for cte_name in ["descendants", "ancestors", "cr_out", "cr_in"]:
            where = _where(_category_tree(cte_name, only_standard=True))
            self.assertIn("rc.standard_concept = 'S'", where, cte_name)

    def test_synonyms_ignore_only_standard(self) -> None:
        self.assertEqual(
            get_category("syn")().build(SCHEMA, only_standard=True),
            get_category("syn")().build(SCHEMA, only_standard=False),
        )
        self.assertNotIn("standard_concept =", get_category("syn")().build(SCHEMA))

    def test_only_direct_applies_to_hierarchy_only(self) -> None:
        for cte_name in ["descendants", "ancestors"]:
            self.assertIn(
                "ca.min_levels_of_separation = 1",
                _where(_category_tree(cte_name, only_direct=True)),
            )
            self.assertNotIn(
                "min_levels_of_separation = 1",
                _where(_category_tree(cte_name, only_direct=False)),
            )
        for cte_name in ["cr_out", "cr_in", "syn"]:
            cls = get_category(cte_name)
            self.assertEqual(
                cls().build(SCHEMA, only_direct=True), cls().build(SCHEMA, only_direct=False)
            )

    def test_direct_edge_filter_follows_hierarchical_flag(self) -> None:
        class FlatDescendants(DescendantCategory):
            hierarchical = False

        self.assertEqual(
            DescendantCategory().direct_edge_filters("ca", only_direct=True),
            ["ca.min_levels_of_separation = 1"],
        )
        self.assertEqual(DescendantCategory().direct_edge_filters("ca", only_direct=False), [])
        self.assertEqual(FlatDescendants().direct_edge_filters("ca", only_direct=True), [])
        self.assertNotIn(
            "min_levels_of_separation = 1",
            _where(_parse(FlatDescendants().build(SCHEMA, only_direct=True))),
        )
        for cte_name in ["cr_out", "cr_in", "syn"]:
            self.assertFalse(get_category(cte_name).hierarchical, cte_name)


class RelationshipQueryTests(unittest.TestCase):
    """Tests for the combined relationship query."""

    def test_single_statement(self) -> None:
        for only_standard in [True, False]:
            for only_direct in [True, False]:
                sql = build_relationship_query(
                    [201826, 4103703], SCHEMA, only_standard=only_standard, only_direct=only_direct
                )
                for dialect in ["redshift", "postgres", "sqlite"]:
                    self.assertTrue(is_single_statement(sql, dialect), dialect)

    def test_cte_layout(self) -> None:
        trees, _ = parse_sql(build_relationship_query([201826], SCHEMA))
        cte_names = [cte.alias for cte in trees[0].find_all(exp.CTE)]
        self.assertEqual(cte_names, ["seed"] + CTE_NAMES + ["combined", "deduplicated"])

    def test_seed_cte(self) -> None:
        seed = build_seed_cte([201826, 4103703], SCHEMA)
        self.assertTrue(seed.startswith("seed AS ("))
        self.assertIn("FROM cdm.concept c", seed)
        self.assertIn("WHERE c.concept_id IN (201826, 4103703)", seed)

    def test_seed_ids_deduplicated(self) -> None:
        sql = build_relationship_query([201826, 4103703, 201826], SCHEMA)
        self.assertIn("WHERE c.concept_id IN (201826, 4103703)", sql)

    def test_union_all_then_distinct(self) -> None:
        sql = build_relationship_query([201826], SCHEMA)
        self.assertEqual(sql.count("UNION ALL"), len(CTE_NAMES) - 1)
        self.assertIn("SELECT DISTINCT", sql)

    def test_output_columns_and_order(self) -> None:
        trees, _ = parse_sql(build_relationship_query([201826], SCHEMA))
        tree = trees[0]
        self.assertEqual(tuple(tree.named_selects), RELATIONSHIP_COLUMNS)
        order = [o.this.sql() for o in tree.args["order"].expressions]
        self.assertEqual(
            order,
            [
                "rel_category",
                "direction",
                "COALESCE(levels_of_separation, 999)",
                "vocabulary_id",
                "related_concept_name",
            ],
        )

    def test_category_subset(self) -> None:
        sql = build_relationship_query([201826], SCHEMA, categories=["syn", "descendants"])
        trees, _ = parse_sql(sql)
        cte_names = [cte.alias for cte in trees[0].find_all(exp.CTE)]
        self.assertEqual(cte_names, ["seed", "descendants", "syn", "combined", "deduplicated"])
        self.assertEqual(sql.count("UNION ALL"), 1)

    def test_single_category_by_name(self) -> None:
        sql = build_relationship_query([201826], SCHEMA, categories="syn")
        self.assertNotIn("UNION ALL", sql)
        self.assertTrue(is_single_statement(sql))

    def test_bad_categories(self) -> None:
        with self.assertRaises(InvalidArgument):
            build_relationship_query([201826], SCHEMA, categories=["siblings"])
        with self.assertRaises(InvalidArgument):
            build_relationship_query([201826], SCHEMA, categories=[])

    def test_bad_ids(self) -> None:
        for ids in [[], ["201826"], [None], [1.25]]:
            with self.assertRaises(InvalidArgument):
                build_relationship_query(ids, SCHEMA)

    def test_bad_schema(self) -> None:
        with self.assertRaises(InvalidArgument):
            build_relationship_query([201826], "cdm.concept; --")


if __name__ == "__main__":
    unittest.main()
