"""Unit tests for the per-part generators (crudgen.generators.*).

Tests cover:
- Output paths for each part under default and custom config paths
- View-dependent component and page selection
- Barrel files
- Skip-if-exists behaviour through the ledger
- generate_tests=false
"""

from __future__ import annotations

import pytest

from crudgen.config import parse_config
from crudgen.generators import (
    ALL_PARTS,
    ApiGenerator,
    ComponentsGenerator,
    GenerateOptions,
    HooksGenerator,
    PagesGenerator,
    TestsGenerator,
    TypesGenerator,
)
from crudgen.schema import normalize, parse_entity


def _make(cls, ledger, renderer, config, formatter):
    return cls(ledger, renderer, config, formatter)


class TestGenerateOptions:
    @pytest.mark.unit
    def test_default_is_all_parts(self):
        assert GenerateOptions().selected_parts() == list(ALL_PARTS)

    @pytest.mark.unit
    def test_only_keeps_fixed_order(self):
        options = GenerateOptions(only=["hooks", "api"])
        assert options.selected_parts() == ["api", "hooks"]

    @pytest.mark.unit
    def test_skip(self):
        options = GenerateOptions(skip=["tests", "pages"])
        assert options.selected_parts() == ["api", "types", "components", "hooks"]

    @pytest.mark.unit
    def test_only_and_skip(self):
        options = GenerateOptions(only=["api", "types"], skip=["types"])
        assert options.selected_parts() == ["api"]


class TestApiAndTypes:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_api_files(self, ledger, renderer, config, formatter, product_schema, project_root):
        data = normalize(product_schema, config)
        produced = await _make(ApiGenerator, ledger, renderer, config, formatter).generate(
            data, GenerateOptions()
        )
        assert produced == ["src/store/product/productApi.ts", "src/store/product/index.ts"]
        assert (project_root / "src/store/product/index.ts").read_text() == (
            "export * from './productApi.js';\n"
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_types_file(self, ledger, renderer, config, formatter, order_schema, project_root):
        data = normalize(order_schema, config)
        produced = await _make(TypesGenerator, ledger, renderer, config, formatter).generate(
            data, GenerateOptions()
        )
        assert produced == ["src/types/orderItem.ts"]
        assert "export interface OrderItem {" in (project_root / produced[0]).read_text()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_custom_paths(self, ledger, renderer, formatter, product_schema):
        config = parse_config({"paths": {"store": "app/state/", "types": "/app/models"}})
        data = normalize(product_schema, config)
        api = await _make(ApiGenerator, ledger, renderer, config, formatter).generate(
            data, GenerateOptions()
        )
        types = await _make(TypesGenerator, ledger, renderer, config, formatter).generate(
            data, GenerateOptions()
        )
        assert api[0] == "app/state/product/productApi.ts"
        assert types == ["app/models/product.ts"]


class TestComponents:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fallback_views(self, ledger, renderer, config, formatter, product_schema, project_root):
        data = normalize(product_schema, config)
        produced = await _make(ComponentsGenerator, ledger, renderer, config, formatter).generate(
            data, GenerateOptions()
        )
        assert produced == [
            "src/components/product/ProductForm.tsx",
            "src/components/product/ProductTable.tsx",
            "src/components/product/ProductDetails.tsx",
            "src/components/product/index.ts",
        ]
        barrel = (project_root / "src/components/product/index.ts").read_text()
        assert barrel == (
            "export { ProductForm } from './ProductForm.js';\n"
            "export { ProductTable } from './ProductTable.js';\n"
            "export { ProductDetails } from './ProductDetails.js';\n"
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_both_list_views(self, ledger, renderer, config, formatter, order_schema):
        data = normalize(order_schema, config)
        generator = _make(ComponentsGenerator, ledger, renderer, config, formatter)
        assert generator.component_kinds(data) == ["Form", "Table", "Grid", "Details"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_grid_only_without_details(self, ledger, renderer, config, formatter, product_raw):
        product_raw["views"] = {
            "list": {"type": "grid", "gridComponent": "ProductCards"},
            "details": False,
            "create/edit": {"type": "modal", "modalType": "drawer"},
        }
        data = normalize(parse_entity(product_raw), config)
        generator = _make(ComponentsGenerator, ledger, renderer, config, formatter)

        produced = await generator.generate(data, GenerateOptions())

        assert generator.component_kinds(data) == ["Form", "Grid"]
        assert "src/components/product/ProductGrid.tsx" in produced
        grid = (ledger.project_root / "src/components/product/ProductGrid.tsx").read_text()
        assert "import { ProductCards } from '../common/ProductCards.js';" in grid


class TestPages:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_modal_views_only_list_page(self, ledger, renderer, config, formatter, product_schema):
        data = normalize(product_schema, config)
        produced = await _make(PagesGenerator, ledger, renderer, config, formatter).generate(
            data, GenerateOptions()
        )
        assert produced == ["src/pages/products/index.tsx"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_routed_views(self, ledger, renderer, config, formatter, order_schema, project_root):
        data = normalize(order_schema, config)
        produced = await _make(PagesGenerator, ledger, renderer, config, formatter).generate(
            data, GenerateOptions()
        )
        assert produced == [
            "src/pages/order-items/index.tsx",
            "src/pages/order-items/create.tsx",
            "src/pages/order-items/[id]/edit.tsx",
            "src/pages/order-items/[id]/index.tsx",
        ]
        for rel in produced:
            assert (project_root / rel).is_file()


class TestHooksAndTests:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_hook_path(self, ledger, renderer, config, formatter, product_schema, project_root):
        data = normalize(product_schema, config)
        produced = await _make(HooksGenerator, ledger, renderer, config, formatter).generate(
            data, GenerateOptions()
        )
        assert produced == ["src/hooks/useProduct.ts"]
        assert "useTenant" in (project_root / produced[0]).read_text()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_test_files(self, ledger, renderer, config, formatter, product_schema):
        data = normalize(product_schema, config)
        produced = await _make(TestsGenerator, ledger, renderer, config, formatter).generate(
            data, GenerateOptions()
        )
        assert produced == [
            "src/__tests__/store/product/productApi.test.ts",
            "src/__tests__/components/product/ProductForm.test.tsx",
        ]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_tests_disabled(self, ledger, renderer, formatter, product_schema):
        config = parse_config({"defaults": {"generateTests": False}})
        data = normalize(product_schema, config)
        produced = await _make(TestsGenerator, ledger, renderer, config, formatter).generate(
            data, GenerateOptions()
        )
        assert produced == []
        assert ledger.files == []


class TestWritePolicy:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_existing_file_reported_but_kept(
        self, ledger, renderer, config, formatter, product_schema, project_root
    ):
        hook = project_root / "src/hooks/useProduct.ts"
        hook.parent.mkdir(parents=True)
        hook.write_text("// customised\n")
        data = normalize(product_schema, config)

        produced = await _make(HooksGenerator, ledger, renderer, config, formatter).generate(
            data, GenerateOptions()
        )

        assert produced == ["src/hooks/useProduct.ts"]
        assert hook.read_text() == "// customised\n"
        assert ledger.skipped == ["src/hooks/useProduct.ts"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_force(self, ledger, renderer, config, formatter, product_schema, project_root):
        hook = project_root / "src/hooks/useProduct.ts"
        hook.parent.mkdir(parents=True)
        hook.write_text("// customised\n")
        data = normalize(product_schema, config)

        await _make(HooksGenerator, ledger, renderer, config, formatter).generate(
            data, GenerateOptions(force=True)
        )

        assert "export function useProduct" in hook.read_text()
