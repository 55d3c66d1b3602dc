"""Setup configuration for reviewtime"""

from setuptools import setup, find_packages

setup(
    name="measure-review-time",
    version="0.1.0",
    description=(
        "CLI tool for GitHub pull request review latency: time to first "
        "review, time to first approval, and total duration."
    ),
    author="measure-review-time Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "measure-review-time=reviewtime.main:main",
        ],
    },
)
