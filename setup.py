import os
import sys

from setuptools import find_packages, setup
from setuptools.command.install import install

# --- Current version

VERSION = "0.1.0"

with open("README.md", "r") as fh:
    long_description = fh.read()


# --- Custom build classes

class VerifyVersionCommand(install):
    """Custom command to verify that the git tag matches our version"""
    description = 'verify that the git tag matches our version'

    def run(self):
        tag = os.getenv('CI_TAG')

        if tag != "v%s" % VERSION:
            info = "Git tag: {0} does not match the version of this app: {1}".format(
                tag, VERSION
            )
            sys.exit(info)

# --- Setup

setup(
    # Basic information
    name='modstub',
    version=VERSION,
    description='Replace the exports of Python modules from tests by hooking the import system',
    long_description=long_description,
    long_description_content_type="text/markdown",
    python_requires=">=3.10",

    # Packages
    packages=find_packages("src") + ["modstub.tests"],
    package_dir={'': 'src'},

    install_requires=[
        "click",
        "omegaconf",
        "termcolor",
    ],
    extras_require={
        "test": ["pytest"],
    },

    entry_points={
        "console_scripts": ["modstub = modstub.cli:main"],
        "pytest11": ["modstub = modstub.pytest_plugin"],
    },

    # We do not allow archives
    zip_safe=False,

    # Version verification
    cmdclass={
        'verify': VerifyVersionCommand
    }
)
