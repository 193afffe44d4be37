import setuptools

with open("README.rst", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="pdenlp",
    version="0.1.0",
    author="The pdenlp developers",
    description="PDE-constrained optimization problems as nonlinear programs",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    packages=setuptools.find_packages(include=["pdenlp", "pdenlp.*"]),
    classifiers=[
        "Topic :: Scientific/Engineering",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Intended Audience :: Education",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Operating System :: OS Independent",
    ],
    keywords="PDE-constrained optimization, nonlinear programming, FEniCS, Ipopt",
    install_requires=[
        "cyipopt>=1.3",
        "mpi4py",
        "numpy>=1.21",
        "petsc4py",
        "scipy>=1.11",
        "typing_extensions",
    ],
    extras_require={
        "test": ["pytest", "matplotlib"],
        "demo": ["matplotlib"],
    },
    entry_points={"console_scripts": ["pdenlp-compare = pdenlp._cli:compare"]},
    python_requires=">=3.9",
)
