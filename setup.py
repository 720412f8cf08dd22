"""libgtp, a typed controller for Go Text Protocol engines.

libgtp
------

Drive GTP engines (GNU Go, KataGo, Leela Zero, ...) as child processes from
Python: build commands, parse responses, never block on the engine.

"""
from setuptools import find_packages, setup

about = {}
with open("src/libgtp/__about__.py", encoding="utf-8") as fp:
    exec(fp.read(), about)

with open("requirements/test.txt", encoding="utf-8") as f:
    tests_reqs = [line for line in f.read().split("\n") if line]

with open("README.md", encoding="utf-8") as f:
    readme = f.read()

with open("CHANGES", encoding="utf-8") as f:
    history = f.read()


setup(
    name=about["__package_name__"],
    version=about["__version__"],
    license=about["__license__"],
    author=about["__author__"],
    description=about["__description__"],
    long_description=readme + "\n\n" + history,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages("src"),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=["typing-extensions; python_version < '3.11'"],
    extras_require={"test": tests_reqs},
    entry_points={"pytest11": ["libgtp = libgtp.pytest_plugin"]},
    zip_safe=False,
    keywords=about["__title__"],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX",
        "Operating System :: MacOS :: MacOS X",
        "Framework :: Pytest",
        "Intended Audience :: Developers",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Programming Language :: Python :: Implementation :: PyPy",
        "Topic :: Games/Entertainment :: Board Games",
        "Topic :: Utilities",
    ],
)
