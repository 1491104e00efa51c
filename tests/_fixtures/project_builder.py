"""Helper utilities for constructing temporary component projects in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import List, Mapping

LOGIN_FORM = """
import React, { useState } from 'react';

/**
 * Login form component for user authentication
 */
const LoginForm = ({ onLogin, redirectUrl, showRegisterLink = true }) => {
  const [email, setEmail] = useState('');

  const handleSubmit = (e) => {
    e.preventDefault();
    onLogin({ email });
  };

  // Render the sign in form
  return (
    <div className="login-form">
      <h2>Sign In</h2>
      <form onSubmit={handleSubmit}>
        <label htmlFor="email">Email</label>
        <input id="email" type="email" value={email} onChange={(e) => setEmail(e.target.value)} />
        <button type="submit">Sign In</button>
      </form>
      {showRegisterLink && (
        <p>Don't have an account? <a href="/register">Create one now</a></p>
      )}
    </div>
  );
};

export default LoginForm;
"""

NAVIGATION = """
import React from 'react';

/**
 * Main navigation component
 */
const Navigation = ({ user, onLogout }) => {
  return (
    <nav className="main-navigation">
      <ul className="nav-links">
        <li><a href="/">Home</a></li>
        <li><a href="/dashboard">Dashboard</a></li>
      </ul>
      {user ? (
        <button onClick={onLogout}>Logout</button>
      ) : (
        <a href="/login">Sign In</a>
      )}
    </nav>
  );
};

export default Navigation;
"""

PRODUCT_SEARCH = """
import React, { useState } from 'react';

/**
 * Product search and filtering component
 */
const ProductSearch = ({ onSearch, onCategoryChange, categories }) => {
  const [searchTerm, setSearchTerm] = useState('');

  const handleSubmit = (e) => {
    e.preventDefault();
    onSearch({ searchTerm });
  };

  return (
    <div className="product-search">
      <h2>Find Products</h2>
      <form onSubmit={handleSubmit}>
        <input type="text" value={searchTerm} onChange={(e) => setSearchTerm(e.target.value)} />
        <button type="submit">Search</button>
      </form>
    </div>
  );
};

export default ProductSearch;
"""

SAMPLE_COMPONENTS: Mapping[str, str] = {
    "src/components/LoginForm.jsx": LOGIN_FORM,
    "src/components/Navigation.jsx": NAVIGATION,
    "src/components/ProductSearch.jsx": PRODUCT_SEARCH,
}


class ProjectBuilder:
    """Utility for writing component files into a throwaway project."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> List[Path]:
        """Write `path -> contents` entries and return their absolute paths."""
        written: List[Path] = []
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")
            written.append(path)
        return written

    def write_samples(self) -> List[Path]:
        return self.write(SAMPLE_COMPONENTS)

    def delete(self, relative: str) -> None:
        (self.root / relative).unlink()

    def path(self, relative: str | None = None) -> Path:
        """Return the project root, or a path inside it."""
        return self.root / relative if relative else self.root


__all__ = ["LOGIN_FORM", "NAVIGATION", "PRODUCT_SEARCH", "ProjectBuilder", "SAMPLE_COMPONENTS"]
