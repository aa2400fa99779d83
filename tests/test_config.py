from pathlib import Path

from apps.core.config import PROJECT_ROOT, Settings


def test_amenities_path_does_not_depend_on_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    settings = Settings(amenities_config_path="config/amenities.yml")
    assert Path(settings.amenities_config_path) == PROJECT_ROOT / "config" / "amenities.yml"
    assert Path(settings.amenities_config_path).is_file()


def test_default_amenities_path_points_at_bundled_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("AMENITIES_CONFIG_PATH", raising=False)
    assert Path(Settings().amenities_config_path).is_file()


def test_absolute_amenities_path_is_kept(tmp_path):
    target = tmp_path / "amenities.yml"
    assert Settings(amenities_config_path=str(target)).amenities_config_path == str(target)
