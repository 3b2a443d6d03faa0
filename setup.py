import setuptools

with open("README.md", "r", encoding = "utf-8") as fh:
	long_description = fh.read()

setuptools.setup(
	name = "datadriven",
	version = "1.0.0",
	description = "Data-driven test files with golden-file rewriting",
	long_description = long_description,
	long_description_content_type = "text/markdown",
	classifiers = [
		"Programming Language :: Python :: 3",
		"License :: OSI Approved :: Apache Software License",
		"Operating System :: OS Independent",
		"Topic :: Software Development :: Testing",
	],
	package_dir = {"": "src"},
	packages = setuptools.find_packages(where="src"),
	python_requires = ">=3.8",
	install_requires = [
		"graphviz", "tqdm", "typing_extensions"
	],
	extras_require = {
		"test": ["pytest"],
	},
	entry_points = {
		"console_scripts": ["datadriven = datadriven.cli:main"],
	},
)
