"""
setup.py for the adaptive-timestep Gray-Scott package.

viewer.py requires pygame, which headless installs (servers, CI) do not
need. It is excluded from the wheel; install the "viewer" extra and run
from a source checkout for the interactive window.
"""

from setuptools import setup
from setuptools.command.build_py import build_py as _build_py


# Modules that require pygame and should not be packaged in the wheel.
_EXCLUDE_MODULES = {"viewer"}


class BuildPy(_build_py):
    """Custom build_py that excludes pygame-dependent modules."""

    def find_package_modules(self, package, package_dir):
        modules = super().find_package_modules(package, package_dir)
        return [
            (pkg, mod, path)
            for (pkg, mod, path) in modules
            if mod not in _EXCLUDE_MODULES
        ]


setup(
    name="adaptive-rd",
    version="0.1.0",
    description="Gray-Scott reaction-diffusion with an energy-adaptive local timestep",
    python_requires=">=3.9",
    package_dir={"": "plugins"},
    packages=["adaptive_rd"],
    install_requires=[
        "numpy>=1.24",
        "pydantic>=2.0",
        "Pillow>=9.0",
    ],
    extras_require={
        "viewer": ["pygame>=2.1"],
        "test": ["pytest>=7.0"],
    },
    cmdclass={"build_py": BuildPy},
)
