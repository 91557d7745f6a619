import os
import sys
sys.path.insert(0, os.path.abspath('..'))

project = 'Py-vFrontier'
copyright = '2026, Py-vFrontier developers'
author = 'Py-vFrontier developers'

version = '0.1.0'
release = '0.1.0'

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.viewcode',
    'sphinx.ext.napoleon',
    'sphinx_rtd_theme',
]

# Mock heavy dependencies so autodoc works even if they are not installed.
autodoc_mock_imports = [
    'numpy',
    'pandas',
    'scipy',
    'cvxopt',
    'matplotlib',
]

# Map common type aliases so cross references resolve properly.
napoleon_type_aliases = {
    'ndarray': 'numpy.ndarray',
    'np.ndarray': 'numpy.ndarray',
    'npt.NDArray': 'numpy.ndarray',
    'np.floating': 'numpy.floating',
    'Series': 'pandas.Series',
    'DataFrame': 'pandas.DataFrame',
    'pd.Series': 'pandas.Series',
    'pd.DataFrame': 'pandas.DataFrame',
}

templates_path = ['_templates']

exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store']

# -- Options for HTML output -------------------------------------------------

html_theme = 'sphinx_rtd_theme'
html_static_path = ['_static']

autodoc_default_options = {
    'members': True,
    'undoc-members': True,
    'show-inheritance': True,
    '__init__': True,
}
