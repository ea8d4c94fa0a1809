from setuptools import setup, find_packages

setup(
    name="lacunastack",
    version="0.1.0",
    author="DillyDilly",
    author_email="aidend@uoregon.edu",
    description="Multi-scale gliding-box lacunarity of 3D occupancy volumes",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    url="https://github.com/apdill/FracStack.git",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: Scientific/Engineering :: Image Processing",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20.0",
        "numba>=0.53.0",
        "tqdm>=4.50.0",
        "pandas>=2.2.0"
    ],
    extras_require={
        "tests": ["pytest>=7.0"],
    },
)
