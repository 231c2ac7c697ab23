"""Detectors for Node.js, Python, Ruby and PHP applications."""

from __future__ import annotations

from flkr.core import Detector, file_exists, read_file_string
from flkr.parsers import (
    PackageJSON,
    PyprojectTOML,
    StrPath,
    parse_composer_json,
    parse_package_json,
    parse_pyproject_toml,
)
from flkr.profile import AppProfile, Framework, Language, PackageManager

_VERSION_PREFIX_CHARS = ">=^~<>!v"
_VERSION_STOP_CHARS = " |&"


def clean_version(v: str) -> str:
    """Strip range operators and prefixes to leave a bare version."""
    v = v.strip().lstrip(_VERSION_PREFIX_CHARS)
    cut = next((i for i, ch in enumerate(v) if ch in _VERSION_STOP_CHARS), None)
    return v if cut is None else v[:cut]


class NodeDetector(Detector):
    """Detects Node.js applications from package.json."""

    name = "node"
    priority = 10

    def detect(self, root: StrPath) -> AppProfile | None:
        """Return a Node.js profile; a malformed package.json raises ValueError."""
        if not file_exists(root, "package.json"):
            return None

        pkg = parse_package_json(root, "package.json")
        profile = AppProfile(
            language=Language.NODE,
            confidence=0.7,
            detected_by=self.name,
        )

        if pkg.node_engine:
            profile.version = clean_version(pkg.node_engine)

        if file_exists(root, "pnpm-lock.yaml"):
            profile.package_manager = PackageManager.PNPM
            profile.has_lockfile = True
            profile.lockfile_type = "pnpm"
        elif file_exists(root, "yarn.lock"):
            profile.package_manager = PackageManager.YARN
            profile.has_lockfile = True
            profile.lockfile_type = "yarn"
        else:
            profile.package_manager = PackageManager.NPM
            if file_exists(root, "package-lock.json"):
                profile.has_lockfile = True
                profile.lockfile_type = "npm"

        if pkg.version:
            profile.app_version = pkg.version

        self._detect_framework(pkg, profile)

        if "build" in pkg.scripts:
            profile.build_command = pkg.scripts["build"]
        if "start" in pkg.scripts:
            profile.start_command = pkg.scripts["start"]

        if profile.port == 0:
            profile.port = 3000

        return profile

    @staticmethod
    def _detect_framework(pkg: PackageJSON, profile: AppProfile) -> None:
        if pkg.has_dep("next"):
            profile.framework, profile.output_dir, profile.confidence = (
                Framework.NEXTJS, ".next", 0.9,
            )
        elif pkg.has_dep("nuxt"):
            profile.framework, profile.output_dir, profile.confidence = (
                Framework.NUXT, ".output", 0.9,
            )
        elif pkg.has_dep("@remix-run/node") or pkg.has_dep("@remix-run/react"):
            profile.framework, profile.output_dir, profile.confidence = (
                Framework.REMIX, "build", 0.85,
            )
        elif pkg.has_dep("vite"):
            profile.framework, profile.output_dir, profile.confidence = (
                Framework.VITE, "dist", 0.8,
            )


_PYTHON_START_COMMANDS = {
    Framework.DJANGO: "python manage.py runserver 0.0.0.0:8000",
    Framework.FLASK: "flask run --host=0.0.0.0",
    Framework.FASTAPI: "uvicorn main:app --host 0.0.0.0 --port 8000",
}

_REQUIREMENT_FRAMEWORKS = (
    ("django", Framework.DJANGO, 0.85),
    ("flask", Framework.FLASK, 0.8),
    ("fastapi", Framework.FASTAPI, 0.85),
)


class PythonDetector(Detector):
    """Detects Python applications."""

    name = "python"
    priority = 20

    def detect(self, root: StrPath) -> AppProfile | None:
        """Return a Python profile if any Python manifest is present."""
        has_pyproject = file_exists(root, "pyproject.toml")
        has_requirements = file_exists(root, "requirements.txt")
        has_pipfile = file_exists(root, "Pipfile")
        has_setup_py = file_exists(root, "setup.py")

        if not (has_pyproject or has_requirements or has_pipfile or has_setup_py):
            return None

        profile = AppProfile(
            language=Language.PYTHON,
            confidence=0.7,
            detected_by=self.name,
            port=8000,
        )

        if file_exists(root, "uv.lock"):
            profile.package_manager = PackageManager.UV
            profile.has_lockfile = True
            profile.lockfile_type = "uv"
        elif file_exists(root, "poetry.lock"):
            profile.package_manager = PackageManager.POETRY
            profile.has_lockfile = True
            profile.lockfile_type = "poetry"
        elif has_pipfile:
            profile.package_manager = PackageManager.PIPENV
            if file_exists(root, "Pipfile.lock"):
                profile.has_lockfile = True
                profile.lockfile_type = "pipenv"
        else:
            profile.package_manager = PackageManager.PIP

        if has_pyproject:
            try:
                pyproj = parse_pyproject_toml(root, "pyproject.toml")
            except (OSError, ValueError):
                pyproj = None
            if pyproj is not None:
                self._detect_framework(pyproj, profile)
                if pyproj.version:
                    profile.app_version = pyproj.version
                if pyproj.requires_python:
                    profile.version = clean_version(pyproj.requires_python)

        if profile.framework == Framework.NONE and has_requirements:
            self._detect_framework_from_requirements(root, profile)

        if profile.framework in _PYTHON_START_COMMANDS:
            profile.start_command = _PYTHON_START_COMMANDS[profile.framework]
        if profile.framework == Framework.FLASK:
            profile.port = 5000

        return profile

    @staticmethod
    def _detect_framework(pyproj: PyprojectTOML, profile: AppProfile) -> None:
        if pyproj.has_dep("django"):
            profile.framework, profile.confidence = Framework.DJANGO, 0.9
        elif pyproj.has_dep("flask"):
            profile.framework, profile.confidence = Framework.FLASK, 0.85
        elif pyproj.has_dep("fastapi"):
            profile.framework, profile.confidence = Framework.FASTAPI, 0.9

    @staticmethod
    def _detect_framework_from_requirements(root: StrPath, profile: AppProfile) -> None:
        content = read_file_string(root, "requirements.txt").lower()
        for line in content.split("\n"):
            line = line.strip()
            for prefix, framework, confidence in _REQUIREMENT_FRAMEWORKS:
                if line.startswith(prefix):
                    profile.framework = framework
                    profile.confidence = confidence
                    return


class RubyDetector(Detector):
    """Detects Ruby applications from a Gemfile."""

    name = "ruby"
    priority = 50

    def detect(self, root: StrPath) -> AppProfile | None:
        """Return a Ruby profile if a Gemfile is present."""
        if not file_exists(root, "Gemfile"):
            return None

        profile = AppProfile(
            language=Language.RUBY,
            package_manager=PackageManager.BUNDLER,
            confidence=0.7,
            detected_by=self.name,
            port=3000,
        )

        if file_exists(root, "Gemfile.lock"):
            profile.has_lockfile = True
            profile.lockfile_type = "bundler"

        version = read_file_string(root, ".ruby-version")
        if version:
            profile.version = version.strip()

        gemfile = read_file_string(root, "Gemfile")
        if "'rails'" in gemfile or '"rails"' in gemfile:
            profile.framework = Framework.RAILS
            profile.confidence = 0.9
            profile.build_command = "bundle exec rake assets:precompile"
            profile.start_command = "bundle exec rails server -b 0.0.0.0"

        if file_exists(root, "config/routes.rb"):
            profile.framework = Framework.RAILS
            profile.confidence = 0.9

        return profile


class PHPDetector(Detector):
    """Detects PHP applications from composer.json."""

    name = "php"
    priority = 70

    def detect(self, root: StrPath) -> AppProfile | None:
        """Return a PHP profile if composer.json is present."""
        if not file_exists(root, "composer.json"):
            return None

        profile = AppProfile(
            language=Language.PHP,
            package_manager=PackageManager.COMPOSER,
            confidence=0.7,
            detected_by=self.name,
            port=8000,
        )

        if file_exists(root, "composer.lock"):
            profile.has_lockfile = True
            profile.lockfile_type = "composer"

        try:
            composer = parse_composer_json(root, "composer.json")
        except (OSError, ValueError):
            return profile

        if composer.version:
            profile.app_version = composer.version
        if "php" in composer.require:
            profile.version = clean_version(composer.require["php"])
        if composer.has_require("laravel/framework"):
            profile.framework = Framework.LARAVEL
            profile.confidence = 0.9
            profile.build_command = "composer install --no-dev --optimize-autoloader"
            profile.start_command = "php artisan serve --host=0.0.0.0 --port=8000"
            profile.output_dir = "public"

        return profile