from setuptools import setup, find_packages

setup(
    name="photo-tagger",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "Pillow>=9.0.0",
        "piexif>=1.1.3",
        "PyYAML>=6.0",
        "appdirs>=1.4.4",
        "Send2Trash>=1.8.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "photo-tagger=photo_tagger.viewer.app:main",
        ],
    },
    python_requires=">=3.9",
)
