from setuptools import setup, find_packages

setup(
    name = "filemeta",
    version = "0.1.0",
    packages = find_packages(exclude=["tests", "tests.*"]),
    package_data={"filemeta": ["resources/public/*"]},
    install_requires=[
        "click>=8.2",
        "loguru",
        "pdfplumber",
        "Pillow",
        "pydantic>=2.0",
        "PyYAML",
        "requests",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "filemeta=filemeta.cli:main",
        ],
    },
    python_requires = ">=3.9",
)
