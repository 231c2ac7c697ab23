from pathlib import Path

import pytest

from flkr.profile import Framework, Language, PackageManager
from flkr.scripting import (
    NodeDetector,
    PHPDetector,
    PythonDetector,
    RubyDetector,
    clean_version,
)


def make_tree(root: Path, files: dict[str, str]) -> Path:
    for name, content in files.items():
        target = root / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    return root


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (">=20.0.0", "20.0.0"),
        ("^8.2", "8.2"),
        (">=3.11", "3.11"),
        ("  ~1.2.3  ", "1.2.3"),
        (">=3.8 <4", "3.8"),
        ("v18 || 20", "18"),
        ("1.0&&2", "1.0"),
    ],
)
def test_clean_version(raw, expected):
    assert clean_version(raw) == expected


# Node.js


def test_node_nextjs(tmp_path):
    make_tree(
        tmp_path,
        {
            "package.json": """{
                "name": "my-app",
                "scripts": {"build": "next build", "start": "next start"},
                "dependencies": {"next": "14.0.0", "react": "18.2.0"},
                "engines": {"node": ">=20.0.0"}
            }""",
            "package-lock.json": "{}",
        },
    )
    profile = NodeDetector().detect(tmp_path)
    assert profile is not None
    assert profile.language == Language.NODE
    assert profile.package_manager == PackageManager.NPM
    assert profile.framework == Framework.NEXTJS
    assert profile.version == "20.0.0"
    assert profile.output_dir == ".next"
    assert profile.build_command == "next build"
    assert profile.start_command == "next start"
    assert profile.has_lockfile is True
    assert profile.port == 3000
    assert profile.confidence == pytest.approx(0.9, abs=0.01)


def test_node_yarn(tmp_path):
    make_tree(
        tmp_path,
        {
            "package.json": '{"name": "app", "dependencies": {"vite": "5.0.0"}}',
            "yarn.lock": "# yarn lockfile",
        },
    )
    profile = NodeDetector().detect(tmp_path)
    assert profile.package_manager == PackageManager.YARN
    assert profile.framework == Framework.VITE
    assert profile.has_lockfile is True


def test_node_pnpm(tmp_path):
    make_tree(
        tmp_path,
        {"package.json": '{"name": "app"}', "pnpm-lock.yaml": "lockfileVersion: 6"},
    )
    profile = NodeDetector().detect(tmp_path)
    assert profile.package_manager == PackageManager.PNPM
    assert profile.lockfile_type == "pnpm"


def test_node_no_package_json(tmp_path):
    assert NodeDetector().detect(tmp_path) is None


def test_node_without_lockfile(tmp_path):
    make_tree(tmp_path, {"package.json": '{"name": "app", "version": "1.2.3"}'})
    profile = NodeDetector().detect(tmp_path)
    assert profile.package_manager == PackageManager.NPM
    assert profile.has_lockfile is False
    assert profile.app_version == "1.2.3"
    assert profile.framework == Framework.NONE
    assert profile.confidence == pytest.approx(0.7)


def test_node_remix_from_dev_dependency(tmp_path):
    make_tree(
        tmp_path,
        {"package.json": '{"devDependencies": {"@remix-run/react": "2.0.0"}}'},
    )
    profile = NodeDetector().detect(tmp_path)
    assert profile.framework == Framework.REMIX
    assert profile.output_dir == "build"


def test_node_malformed_package_json_raises(tmp_path):
    make_tree(tmp_path, {"package.json": "{not json"})
    with pytest.raises(ValueError):
        NodeDetector().detect(tmp_path)


# Python


def test_python_fastapi(tmp_path):
    make_tree(
        tmp_path,
        {
            "pyproject.toml": (
                "[project]\n"
                'name = "my-app"\n'
                'requires-python = ">=3.11"\n'
                'dependencies = ["fastapi>=0.100.0", "uvicorn[standard]>=0.23.0"]\n'
            ),
            "uv.lock": "version = 1\n",
        },
    )
    profile = PythonDetector().detect(tmp_path)
    assert profile.language == Language.PYTHON
    assert profile.package_manager == PackageManager.UV
    assert profile.framework == Framework.FASTAPI
    assert profile.version == "3.11"
    assert profile.has_lockfile is True
    assert profile.start_command == "uvicorn main:app --host 0.0.0.0 --port 8000"


def test_python_django_requirements(tmp_path):
    make_tree(tmp_path, {"requirements.txt": "django>=4.2\npsycopg2-binary\n"})
    profile = PythonDetector().detect(tmp_path)
    assert profile.framework == Framework.DJANGO
    assert profile.package_manager == PackageManager.PIP
    assert profile.start_command == "python manage.py runserver 0.0.0.0:8000"


def test_python_no_match(tmp_path):
    assert PythonDetector().detect(tmp_path) is None


def test_python_flask_requirements_sets_port(tmp_path):
    make_tree(tmp_path, {"requirements.txt": "Flask==3.0\n"})
    profile = PythonDetector().detect(tmp_path)
    assert profile.framework == Framework.FLASK
    assert profile.port == 5000
    assert profile.start_command == "flask run --host=0.0.0.0"


def test_python_poetry_dependency(tmp_path):
    make_tree(
        tmp_path,
        {
            "pyproject.toml": '[tool.poetry.dependencies]\ndjango = "^4.2"\n',
            "poetry.lock": "",
        },
    )
    profile = PythonDetector().detect(tmp_path)
    assert profile.package_manager == PackageManager.POETRY
    assert profile.framework == Framework.DJANGO
    assert profile.confidence == pytest.approx(0.9)


def test_python_pipenv_with_lock(tmp_path):
    make_tree(tmp_path, {"Pipfile": "[packages]\n", "Pipfile.lock": "{}"})
    profile = PythonDetector().detect(tmp_path)
    assert profile.package_manager == PackageManager.PIPENV
    assert profile.lockfile_type == "pipenv"
    assert profile.port == 8000


def test_python_malformed_pyproject_is_ignored(tmp_path):
    make_tree(tmp_path, {"pyproject.toml": "[project\nbroken"})
    profile = PythonDetector().detect(tmp_path)
    assert profile.language == Language.PYTHON
    assert profile.framework == Framework.NONE
    assert profile.package_manager == PackageManager.PIP


# Ruby


def test_ruby_rails(tmp_path):
    make_tree(
        tmp_path,
        {
            "Gemfile": 'source "https://rubygems.org"\ngem "rails", "~> 7.1"\n',
            "Gemfile.lock": "GEM\n",
            "config/routes.rb": "Rails.application.routes.draw do\nend\n",
            ".ruby-version": "3.2.2\n",
        },
    )
    profile = RubyDetector().detect(tmp_path)
    assert profile.language == Language.RUBY
    assert profile.framework == Framework.RAILS
    assert profile.version == "3.2.2"
    assert profile.has_lockfile is True
    assert profile.start_command == "bundle exec rails server -b 0.0.0.0"


def test_ruby_routes_only_marks_rails(tmp_path):
    make_tree(tmp_path, {"Gemfile": "gem 'sinatra'\n", "config/routes.rb": ""})
    profile = RubyDetector().detect(tmp_path)
    assert profile.framework == Framework.RAILS
    assert profile.build_command == ""


def test_ruby_plain(tmp_path):
    make_tree(tmp_path, {"Gemfile": "gem 'sinatra'\n"})
    profile = RubyDetector().detect(tmp_path)
    assert profile.framework == Framework.NONE
    assert profile.has_lockfile is False
    assert profile.confidence == pytest.approx(0.7)


def test_ruby_no_gemfile(tmp_path):
    assert RubyDetector().detect(tmp_path) is None


# PHP


def test_php_laravel(tmp_path):
    make_tree(
        tmp_path,
        {
            "composer.json": '{"require": {"php": "^8.2", "laravel/framework": "^10.0"}}',
            "composer.lock": "{}",
        },
    )
    profile = PHPDetector().detect(tmp_path)
    assert profile.language == Language.PHP
    assert profile.framework == Framework.LARAVEL
    assert profile.version == "8.2"
    assert profile.output_dir == "public"
    assert profile.has_lockfile is True


def test_php_plain(tmp_path):
    make_tree(tmp_path, {"composer.json": '{"version": "2.0.0", "require": {}}'})
    profile = PHPDetector().detect(tmp_path)
    assert profile.framework == Framework.NONE
    assert profile.app_version == "2.0.0"
    assert profile.has_lockfile is False
    assert profile.port == 8000


def test_php_malformed_composer_still_matches(tmp_path):
    make_tree(tmp_path, {"composer.json": "{broken"})
    profile = PHPDetector().detect(tmp_path)
    assert profile.package_manager == PackageManager.COMPOSER
    assert profile.framework == Framework.NONE


def test_php_no_composer(tmp_path):
    assert PHPDetector().detect(tmp_path) is None