from setuptools import setup, find_packages

setup(
    name="rewind",
    version="0.1.0",
    description="VHS / glitch effect compositing for still images, with GIF and video loop export",
    packages=find_packages(include=["rewind", "rewind.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.24",
        "scipy>=1.10",
        "Pillow>=10.0",
        "moviepy>=2.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "rewind=rewind.cli:main",
        ],
    },
)
