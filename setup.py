"""
Setup file.
"""

from setuptools import find_packages, setup

KEYWORDS = "subprocess cli wrapper stdout stderr log"


if __name__ == "__main__":
    setup(
        name="cli-wrapper",
        version="1.0.0",
        description="Run an external program, stream its output live and log it to a file.",
        keywords=KEYWORDS,
        python_requires=">=3.10",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        install_requires=["psutil"],
        extras_require={"test": ["pytest"]},
        entry_points={"console_scripts": ["cli-wrapper=cli_wrapper.cli:main"]},
        include_package_data=True)
