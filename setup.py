from pathlib import Path

from setuptools import find_packages, setup

ROOT = Path(__file__).parent

README = (ROOT / "README.md").read_text(encoding="utf-8") if (ROOT / "README.md").exists() else ""

setup(
    name="telemetry-client",
    version="0.1.0",
    description="HTTP client for submitting metrics and events to a monitoring API",
    long_description=README,
    long_description_content_type="text/markdown",
    author="Axiv IT Group",
    url="https://example.com/telemetry-client",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"telemetry_client": ["config/*.json"]},
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[
        "psutil",
        "requests",
        "PyYAML",
        "jsonschema",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "telemetry-client=telemetry_client.main:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Environment :: Console",
        "Topic :: System :: Monitoring",
    ],
)
