from setuptools import setup, find_packages

main_ns = {}
with open("src/sheet_preview/_version.py") as ver_file:
    exec(ver_file.read(), main_ns)

setup(
    name="sheet-preview",
    version=main_ns["__version__"],
    author="Jon Connell",
    author_email="python@figsandfudge.com",
    description="Edit the tables of HTML documents as lightweight spreadsheets",
    license="MIT",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    entry_points={
        "console_scripts": [
            "cat-sheet=sheet_preview._cat_sheet:main",
        ],
    },
    install_requires=["beautifulsoup4", "enum-tools", "sigfig"],
    extras_require={
        "test": ["pytest", "pytest-check", "pytest-console-scripts"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
