import unittest
from datetime import datetime
from math import ceil

import base  # noqa: F401  (puts src/ on sys.path)

from db.models import Client, Product
from utils.pure import (
    LOW_STOCK_THRESHOLD,
    PAGE_SIZE_OPTIONS,
    filter_entities,
    generate_markdown_table,
    inventory_summary,
    paginate,
    parse_bound,
    to_float,
    to_int,
)

NOW = datetime(2025, 1, 31, 12, 0)


def product(pid, name, location, quantity, cost=1.0, sale_price=2.0):
    return Product(pid, name, location, quantity, cost, sale_price, NOW, NOW)


PRODUCTS = [
    product("1", "Arena 5kg", "Oruro", 10),
    product("2", "Arena 10kg", "La Paz", 3),
    product("3", "Arena Lavanda 5kg", "Oruro", 25),
    product("4", "Pala", "Sucre", 0),
    product("5", "arena gatitos", "La Paz", 12),
]


class FilterTestCase(unittest.TestCase):
    def test_empty_filters_match_everything_in_order(self):
        self.assertEqual(filter_entities(PRODUCTS), PRODUCTS)

    def test_search_is_case_insensitive_substring(self):
        names = [p.name for p in filter_entities(PRODUCTS, search="ARENA")]
        self.assertEqual(
            names, ["Arena 5kg", "Arena 10kg", "Arena Lavanda 5kg", "arena gatitos"]
        )
        self.assertEqual(
            [p.id for p in filter_entities(PRODUCTS, search=" 5kg ")], ["1", "3"]
        )

    def test_search_over_several_fields(self):
        clients = [
            Client("1", "Ana", "ana@mail.com", "Oruro", NOW, NOW),
            Client("2", "Beto", "70012345", "La Paz", NOW, NOW),
        ]
        found = filter_entities(clients, search="7001", search_fields=("name", "contact"))
        self.assertEqual([c.id for c in found], ["2"])

    def test_category_is_exact_match(self):
        found = filter_entities(PRODUCTS, category_field="location", category="La Paz")
        self.assertEqual([p.id for p in found], ["2", "5"])
        self.assertEqual(
            filter_entities(PRODUCTS, category_field="location", category="la paz"), []
        )

    def test_range_is_inclusive_and_open_ended(self):
        def ids(lo, hi):
            return [
                p.id
                for p in filter_entities(
                    PRODUCTS, range_field="quantity", min_value=lo, max_value=hi
                )
            ]

        self.assertEqual(ids(10, 12), ["1", "5"])
        self.assertEqual(ids(None, 3), ["2", "4"])
        self.assertEqual(ids(25, None), ["3"])
        self.assertEqual(ids(None, None), ["1", "2", "3", "4", "5"])

    def test_filters_commute(self):
        by_search = dict(search="arena")
        by_location = dict(category_field="location", category="Oruro")
        by_range = dict(range_field="quantity", min_value=11)

        combined = filter_entities(PRODUCTS, **by_search, **by_location, **by_range)
        for first, second, third in [
            (by_search, by_location, by_range),
            (by_range, by_location, by_search),
            (by_location, by_range, by_search),
        ]:
            chained = filter_entities(
                filter_entities(filter_entities(PRODUCTS, **first), **second), **third
            )
            self.assertEqual(chained, combined)
        self.assertEqual([p.id for p in combined], ["3"])

    def test_parse_bound(self):
        self.assertIsNone(parse_bound(""))
        self.assertIsNone(parse_bound("   "))
        self.assertIsNone(parse_bound(None))
        self.assertIsNone(parse_bound("abc"))
        self.assertEqual(parse_bound(" 11 "), 11)
        self.assertEqual(parse_bound("0"), 0)


class PaginateTestCase(unittest.TestCase):
    def test_pages_partition_the_filtered_set(self):
        for n in range(0, 23):
            items = list(range(n))
            for size in (1, 3, *PAGE_SIZE_OPTIONS):
                first = paginate(items, 1, size)
                self.assertEqual(first.page_count, max(ceil(n / size), 1))

                pages = [paginate(items, p, size) for p in range(1, first.page_count + 1)]
                joined = [x for page in pages for x in page.items]
                self.assertEqual(joined, items)
                if n:
                    self.assertTrue(all(page.items for page in pages))

    def test_display_range(self):
        items = list(range(12))
        page = paginate(items, 3, 5)
        self.assertEqual((page.start, page.end, page.total), (11, 12, 12))
        self.assertTrue(page.has_prev)
        self.assertFalse(page.has_next)

        page = paginate(items, 1, 5)
        self.assertEqual((page.start, page.end), (1, 5))
        self.assertFalse(page.has_prev)
        self.assertTrue(page.has_next)

    def test_empty_set_has_one_empty_page(self):
        page = paginate([], 4, 10)
        self.assertEqual(page.page, 1)
        self.assertEqual(page.page_count, 1)
        self.assertEqual((page.start, page.end), (0, 0))
        self.assertEqual(page.items, [])

    def test_out_of_range_page_is_clamped(self):
        self.assertEqual(paginate(list(range(7)), 0, 5).page, 1)
        self.assertEqual(paginate(list(range(7)), 9, 5).page, 2)

    def test_bad_page_size(self):
        with self.assertRaises(ValueError):
            paginate([1], 1, 0)


class HelpersTestCase(unittest.TestCase):
    def test_to_int(self):
        self.assertEqual(to_int("3"), 3)
        self.assertEqual(to_int("12.7"), 12)
        self.assertEqual(to_int(8.9), 8)
        self.assertEqual(to_int("nan"), 0)
        self.assertEqual(to_int(None), 0)
        self.assertEqual(to_int(""), 0)

    def test_to_float(self):
        self.assertEqual(to_float("2,5"), 2.5)
        self.assertEqual(to_float(3), 3.0)
        self.assertEqual(to_float("abc"), 0.0)
        self.assertEqual(to_float(None), 0.0)
        self.assertEqual(to_float("Bs. 1.500,50"), 1500.5)
        self.assertEqual(to_float("12.5"), 12.5)

    def test_inventory_summary(self):
        summary = inventory_summary(PRODUCTS, [object(), object()])
        self.assertEqual(summary["total_products"], 5)
        self.assertEqual(summary["total_units"], 50)
        self.assertEqual(summary["cost_value"], 50.0)
        self.assertEqual(summary["sale_value"], 100.0)
        self.assertEqual(
            summary["low_stock_products"],
            sum(1 for p in PRODUCTS if p.quantity < LOW_STOCK_THRESHOLD),
        )
        self.assertEqual(summary["total_clients"], 2)

    def test_generate_markdown_table(self):
        md = generate_markdown_table(["Campo", "Valor"], [["Nombre", "Arena"]], ["l", "r"])
        self.assertEqual(
            md, "| Campo | Valor |\n| :--- | ---: |\n| Nombre | Arena |"
        )
        self.assertEqual(generate_markdown_table(["a"], []), "")
        with self.assertRaises(ValueError):
            generate_markdown_table(["a", "b"], [["1", "2"]], ["l"])


if __name__ == "__main__":
    unittest.main()
