from setuptools import find_packages
from setuptools import setup

setup(
    name="priority-index",
    version="0.1.0",
    description="Per-area receptivity x vulnerability index for prioritizing epidemiological sampling.",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "click",
        "geopandas",
        "numba",
        "numpy",
        "shapely",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
