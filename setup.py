from setuptools import find_packages, setup


setup(
    name="pyvugu",
    version="0.1.0",
    description="Compile HTML-like component templates into Python virtual DOM builders.",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.9",
    install_requires=[
        "black>=23.1",
        "rich>=13.0",
        "rich-click>=1.7",
        "xxhash>=3.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "pyvugu=pyvugu.cli.main:cli",
        ],
    },
    zip_safe=False,
)
