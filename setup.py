import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="dynstruct",
    version="0.0.1",
    author="Gianluca Pacchiella",
    author_email="gp@ktln2.org",
    description="Declarative decoding of binary containers with dependent offsets",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'capstone',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GPLv2 License",
        "Operating System :: OS Independent",
    ],
)
