import json
import logging

import pytest

from script_engines.assets.models import AssetKind, FileCategory
from script_engines.assets.service import (
    FilesystemMetadataLoader,
    detect_file_type,
    get_file_extension,
    is_image_type,
    is_live2d,
    resolve_asset_path,
)


@pytest.mark.parametrize(
    "path,category",
    [
        ("alice.PNG", FileCategory.IMAGE),
        ("bg/park.webp", FileCategory.IMAGE),
        ("spin.gif", FileCategory.GIF),
        ("op.webm", FileCategory.VIDEO_WEBM),
        ("alice/model.json", FileCategory.LIVE2D_JSON),
        ("group/models.jsonl", FileCategory.LIVE2D_JSONL),
        ("notes.txt", FileCategory.UNKNOWN),
        ("noext", FileCategory.UNKNOWN),
    ],
)
def test_detect_file_type(path, category):
    assert detect_file_type(path).category == category


def test_extension_ignores_dotted_folders():
    assert get_file_extension("v1.2/figure") == ""
    assert get_file_extension("C:\\game\\figure\\a.Jpeg") == "jpeg"


def test_type_predicates():
    assert is_image_type("a.gif")
    assert not is_image_type("a.json")
    assert is_live2d("a.jsonl")
    assert not is_live2d("a.png")


def test_resolve_asset_path():
    assert resolve_asset_path("alice.png", "/games/demo") == "/games/demo/game/figure/alice.png"
    assert resolve_asset_path("park.jpg", "/games/demo", AssetKind.BACKGROUND) == "/games/demo/game/background/park.jpg"
    assert resolve_asset_path("/abs/alice.png", "/games/demo") == "/abs/alice.png"
    assert resolve_asset_path("C:/assets/a.png", "/games/demo") == "C:/assets/a.png"


def test_resolve_without_game_folder_warns(caplog):
    with caplog.at_level(logging.WARNING):
        assert resolve_asset_path("alice.png") == "alice.png"
    assert "No game folder" in caplog.text


def _figure_dir(tmp_path):
    figure_dir = tmp_path / "game" / "figure"
    figure_dir.mkdir(parents=True)
    return figure_dir


class TestFilesystemMetadataLoader:
    def test_cubism3_model(self, tmp_path):
        (_figure_dir(tmp_path) / "alice.model3.json").write_text(
            json.dumps(
                {
                    "FileReferences": {
                        "Motions": {"idle": [{"File": "idle.motion3.json"}], "wave": []},
                        "Expressions": [{"Name": "smile", "File": "smile.exp3.json"}],
                    }
                }
            ),
            encoding="utf-8",
        )
        meta = FilesystemMetadataLoader(str(tmp_path)).load("alice.model3.json")
        assert meta.motions == ["idle", "wave"]
        assert meta.expressions == ["smile"]

    def test_cubism2_model(self, tmp_path):
        (_figure_dir(tmp_path) / "bob.json").write_text(
            json.dumps({"motions": {"tap": [], "idle": []}, "expressions": [{"name": "angry"}]}),
            encoding="utf-8",
        )
        meta = FilesystemMetadataLoader(str(tmp_path)).load("bob.json")
        assert meta.motions == ["tap", "idle"]
        assert meta.expressions == ["angry"]

    def test_jsonl_aggregates_and_dedupes(self, tmp_path):
        figure_dir = _figure_dir(tmp_path)
        (figure_dir / "sub").mkdir()
        (figure_dir / "sub" / "a.json").write_text(
            json.dumps({"motions": {"idle": []}, "expressions": [{"name": "smile"}]}), encoding="utf-8"
        )
        lines = [
            json.dumps({"path": "sub/a.json"}),
            "",
            json.dumps({"motions": ["idle", "bow"], "expressions": ["cry"]}),
            json.dumps({"path": "sub/missing.json"}),
        ]
        (figure_dir / "group.jsonl").write_text("\n".join(lines), encoding="utf-8")

        meta = FilesystemMetadataLoader(str(tmp_path)).load("group.jsonl")
        assert meta.motions == ["idle", "bow"]
        assert meta.expressions == ["smile", "cry"]

    def test_unreadable_file_yields_empty(self, tmp_path, caplog):
        _figure_dir(tmp_path)
        with caplog.at_level(logging.WARNING):
            meta = FilesystemMetadataLoader(str(tmp_path)).load("missing.json")
        assert meta.motions == [] and meta.expressions == []
        assert "Failed to read Live2D metadata" in caplog.text

    def test_invalid_json_yields_empty(self, tmp_path):
        (_figure_dir(tmp_path) / "bad.json").write_text("{not json", encoding="utf-8")
        meta = FilesystemMetadataLoader(str(tmp_path)).load("bad.json")
        assert meta.motions == []

    def test_non_live2d_path_is_skipped(self, tmp_path):
        meta = FilesystemMetadataLoader(str(tmp_path)).load("alice.png")
        assert meta.motions == [] and meta.expressions == []
