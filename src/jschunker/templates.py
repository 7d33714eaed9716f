"""JavaScript templates for the generated loader and Node entry point."""

import json

BROWSER_LOADER = """(function() {
  'use strict';

  const loadedChunks = new Set();
  const chunkExports = {};

  async function loadManifest() {
    const response = await fetch('./manifest.json');
    if (!response.ok) {
      throw new Error(`Failed to load manifest: ${response.status}`);
    }
    return response.json();
  }

  function loadChunk(chunk) {
    if (loadedChunks.has(chunk.id)) {
      return Promise.resolve(chunkExports[chunk.id]);
    }

    return new Promise((resolve, reject) => {
      const script = document.createElement('script');
      script.src = `./${chunk.filename}`;
      script.async = false;
      script.onload = () => {
        loadedChunks.add(chunk.id);
        chunkExports[chunk.id] = chunk.exports;
        resolve(chunkExports[chunk.id]);
      };
      script.onerror = () => reject(new Error(`Failed to load chunk: ${chunk.id}`));
      document.head.appendChild(script);
    });
  }

  async function loadChunkWithDependencies(chunk, byId) {
    for (const depId of chunk.dependencies) {
      const dep = byId.get(depId);
      if (dep && !loadedChunks.has(depId)) {
        await loadChunkWithDependencies(dep, byId);
      }
    }
    await loadChunk(chunk);
  }

  async function loadAllChunks() {
    try {
      const manifest = await loadManifest();
      const byId = new Map(manifest.chunks.map((c) => [c.id, c]));
      const ordered = [...manifest.chunks].sort((a, b) => a.order - b.order);

      for (const chunk of ordered) {
        await loadChunkWithDependencies(chunk, byId);
      }

      window.dispatchEvent(new CustomEvent('jschunker:loaded', {
        detail: { manifest, exports: chunkExports }
      }));
    } catch (error) {
      console.error('Failed to load chunks:', error);
      window.dispatchEvent(new CustomEvent('jschunker:error', {
        detail: { error }
      }));
    }
  }

  window.__jschunker__ = {
    loadedChunks,
    chunkExports,
    loadChunk,
    loadAllChunks,
  };

  if (!window.__jschunker_manual__) {
    if (document.readyState === 'loading') {
      document.addEventListener('DOMContentLoaded', loadAllChunks);
    } else {
      loadAllChunks();
    }
  }
})();
"""

NODE_ENTRY = """#!/usr/bin/env node
'use strict';

const fs = require('fs');
const path = require('path');
const vm = require('vm');

// Chunks run as scripts in the shared global context so that top-level
// declarations stay visible to the chunks after them.
const chunks = __CHUNKS__;

const moduleExports = {};

for (const chunk of chunks) {
  const code = fs.readFileSync(path.join(__dirname, chunk.filename), 'utf8');
  vm.runInThisContext(code, { filename: chunk.filename });
  for (const name of chunk.exports) {
    moduleExports[name] = vm.runInThisContext(name);
  }
}

module.exports = moduleExports;
"""


def render_node_entry(chunks: list[dict]) -> str:
    """Fill the Node entry template with chunk metadata in load order."""
    listing = json.dumps(
        [{"id": c["id"], "filename": c["filename"], "exports": c["exports"]} for c in chunks],
        indent=2,
    )
    return NODE_ENTRY.replace("__CHUNKS__", listing)
