from setuptools import setup, find_packages

setup(
    name="photo-albums",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "Pillow>=9.0.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "photo-albums=photo_albums.cli:main",
        ],
    },
    python_requires=">=3.10",
)
