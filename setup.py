from setuptools import setup, find_packages

from pycavro.__version__ import __version__

with open("README.md", "r", encoding="utf-8") as f:
  long_description = f.read()


extras_dev = [
    "pytest",
    "pytest-timeout",
    "pylint",
    "mypy",
  ]

extras_all = extras_dev

setup(
  name="PyCavro",
  version=__version__,
  packages=find_packages(include=["pycavro", "pycavro.*"]),
  description="Async driver for Cavro syringe pumps",
  long_description=long_description,
  long_description_content_type="text/markdown",
  install_requires=["typing_extensions", "pyserial"],
  package_data={"pycavro": ["version.txt"]},
  extras_require={
    "dev": extras_dev,
    "all": extras_all,
  },
)
