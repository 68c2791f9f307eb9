import jinja2
import pytest

from socialsite.templates import Templates, assets_dir, list_files, photo_folder


@pytest.fixture
def template_dir(tmp_path):
    (tmp_path / "home.html").write_text("Hi {{ username }}", encoding="utf-8")
    (tmp_path / "sign.html").write_text("Error: {{ data }}", encoding="utf-8")
    sub = tmp_path / "parts"
    sub.mkdir()
    (sub / "user.html").write_text("{{ user }}", encoding="utf-8")
    return tmp_path


def test_list_files_order(template_dir):
    root = str(template_dir)
    assert list_files(root) == [
        f"{root}/home.html",
        f"{root}/sign.html",
        f"{root}/parts/user.html",
    ]


def test_list_files_missing_directory(tmp_path):
    assert list_files(str(tmp_path / "absent")) == []


def test_render_mapping(template_dir):
    templates = Templates(str(template_dir))
    assert templates.render("home.html", {"username": "ann"}) == "Hi ann"


def test_render_escapes_and_nested(template_dir):
    templates = Templates(str(template_dir))
    assert templates.render("user.html", {"user": "<b>"}) == "&lt;b&gt;"


def test_render_non_mapping_data(template_dir):
    templates = Templates(str(template_dir))
    assert templates.render("sign.html", "taken") == "Error: taken"


def test_unknown_template(template_dir):
    templates = Templates(str(template_dir))
    with pytest.raises(jinja2.TemplateNotFound):
        templates.render("missing.html", {})


def test_empty_directory_rejected(tmp_path):
    with pytest.raises(ValueError):
        Templates(str(tmp_path))


def test_photo_folder():
    assert photo_folder() == "../files/"


def test_assets_dir_local(tmp_path, monkeypatch):
    monkeypatch.delenv("SOCIALSITE_ASSETS", raising=False)
    (tmp_path / "assets").mkdir()
    monkeypatch.chdir(tmp_path)
    assert assets_dir() == "assets"


def test_assets_dir_fallback_and_override(tmp_path, monkeypatch):
    monkeypatch.delenv("SOCIALSITE_ASSETS", raising=False)
    monkeypatch.chdir(tmp_path)
    assert assets_dir() == "/root/social/assets"
    monkeypatch.setenv("SOCIALSITE_ASSETS", str(tmp_path))
    assert assets_dir() == str(tmp_path)