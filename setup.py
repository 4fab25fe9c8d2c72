from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

SEVEN_ZIP_REQUIRES = ["py7zr>=0.20"]
RAR_REQUIRES = ["rarfile>=4.0"]

setup(
    name="arcvfs",
    version="0.1.0",
    author="Tim Hosking",
    author_email="github.com/Munger",
    description="Browse, read and extract archives of any format as directory trees",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/Munger/arcvfs",
    project_urls={
        "Bug Tracker": "https://github.com/Munger/arcvfs/issues",
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: System :: Filesystems",
        "Topic :: System :: Archiving",
        "Topic :: System :: Archiving :: Compression",
    ],
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "zstandard>=0.15",
    ],
    extras_require={
        "7z": SEVEN_ZIP_REQUIRES,
        "rar": RAR_REQUIRES,
        "all": SEVEN_ZIP_REQUIRES + RAR_REQUIRES,
        "test": ["pytest>=7.0"] + SEVEN_ZIP_REQUIRES + RAR_REQUIRES,
    },
)
