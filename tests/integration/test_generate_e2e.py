"""End-to-end test: init -> generate -> regenerate -> clean on a real project dir.

Runs the CLI entry point against a temporary Node.js project without
Prettier (``--no-format``) and checks the generated tree and manifest.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from crudgen.cli import main

ORDER_FILES = [
    "src/store/orderItem/orderItemApi.ts",
    "src/store/orderItem/index.ts",
    "src/types/orderItem.ts",
    "src/components/orderItem/OrderItemForm.tsx",
    "src/components/orderItem/OrderItemTable.tsx",
    "src/components/orderItem/OrderItemGrid.tsx",
    "src/components/orderItem/OrderItemDetails.tsx",
    "src/components/orderItem/index.ts",
    "src/pages/order-items/index.tsx",
    "src/pages/order-items/create.tsx",
    "src/pages/order-items/[id]/edit.tsx",
    "src/pages/order-items/[id]/index.tsx",
    "src/hooks/useOrderItem.ts",
    "src/__tests__/store/orderItem/orderItemApi.test.ts",
    "src/__tests__/components/orderItem/OrderItemForm.test.tsx",
]


def _cli(root: Path, *args: str) -> int:
    try:
        main(["--project-root", str(root), *args])
    except SystemExit as e:
        return e.code
    return 0


def _manifest(root: Path) -> dict:
    return json.loads((root / ".crud-gen" / "manifest.json").read_text(encoding="utf-8"))


class TestGenerateEndToEnd:
    @pytest.mark.integration
    def test_full_lifecycle(self, project_root, order_raw):
        schema_file = project_root / "schemas" / "order-item.yaml"
        schema_file.parent.mkdir()
        schema_file.write_text(yaml.safe_dump(order_raw, sort_keys=False), encoding="utf-8")

        # init
        assert _cli(project_root, "init") == 0
        assert _manifest(project_root) == {}

        # generate
        assert _cli(project_root, "generate", "schemas/order-item.yaml", "--no-format") == 0
        entry = _manifest(project_root)["OrderItem"]
        assert entry["files"] == ORDER_FILES
        for rel in ORDER_FILES:
            assert (project_root / rel).is_file(), rel

        form = (project_root / "src/components/orderItem/OrderItemForm.tsx").read_text()
        assert "<Field.Label>Contact email</Field.Label>" in form
        assert "quantity: yup.number().min(1, 'Must be at least 1').max(99, 'Must be at most 99')," in form
        types = (project_root / "src/types/orderItem.ts").read_text()
        assert "  createdAt?: Date;" in types

        # regenerate without force: hand edits survive, ownership kept
        hook = project_root / "src/hooks/useOrderItem.ts"
        hook.write_text("// hand edited\n", encoding="utf-8")
        assert _cli(project_root, "generate", "schemas/order-item.yaml", "--no-format") == 0
        assert hook.read_text() == "// hand edited\n"
        regenerated = _manifest(project_root)["OrderItem"]
        assert sorted(regenerated["files"]) == sorted(ORDER_FILES)
        assert regenerated["generatedAt"] == entry["generatedAt"]

        # clean
        assert _cli(project_root, "clean", "OrderItem", "--yes") == 0
        assert _manifest(project_root) == {}
        for rel in ORDER_FILES:
            assert not (project_root / rel).exists(), rel
        assert (project_root / "package.json").exists()
