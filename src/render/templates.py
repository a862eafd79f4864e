"""Jinja2 templates for every page of the site."""

from jinja2 import DictLoader, Environment, StrictUndefined, select_autoescape

from src.icons import render_icon

BASE_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en" class="dark">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{% block title %}{{ site.title }}{% endblock %}</title>
<meta name="description" content="{% block description %}{{ site.description }}{% endblock %}">
<meta name="author" content="{{ site.author }}">
<meta name="twitter:site" content="{{ site.twitter }}">
<link rel="canonical" href="{{ site.url }}{{ canonical_path }}">
<link rel="alternate" type="application/rss+xml" title="{{ site.title }}" href="/rss.xml">
<script>
  (function () {
    var theme = localStorage.getItem("theme");
    if (theme === "light") { document.documentElement.classList.remove("dark"); }
  })();
</script>
<style>
  :root { --bg: #ffffff; --fg: #171717; --muted: #525252; --border: #d4d4d4; --accent: #16a34a; }
  html.dark { --bg: #0a0a0a; --fg: #e5e5e5; --muted: #a3a3a3; --border: rgba(255,255,255,0.1); --accent: #4ade80; }
  body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
         background: var(--bg); color: var(--fg); margin: 0; line-height: 1.6; }
  a { color: inherit; }
  .nav { position: sticky; top: 0; border-bottom: 1px solid var(--border); background: var(--bg); }
  .nav-inner, main, footer { max-width: 48rem; margin: 0 auto; padding: 0 1.5rem; }
  .nav-inner { display: flex; align-items: center; justify-content: space-between; height: 4rem; }
  .nav-links { display: flex; gap: 1.25rem; font-size: 0.9rem; color: var(--muted); }
  .nav-links a { text-decoration: none; }
  .brand { font-weight: 700; text-decoration: none; display: flex; gap: 0.5rem; align-items: center; }
  main { padding-top: 3rem; padding-bottom: 5rem; }
  .section-title { font-family: monospace; font-size: 0.75rem; text-transform: uppercase;
                   letter-spacing: 0.1em; color: var(--muted); border-bottom: 1px solid var(--border);
                   padding-bottom: 0.5rem; margin: 4rem 0 1.5rem; }
  .card { display: block; padding: 1rem; border: 1px solid var(--border); border-radius: 0.5rem;
          margin-bottom: 0.75rem; text-decoration: none; }
  .card:hover h3, .card:hover h4 { color: var(--accent); }
  .card h3, .card h4 { margin: 0 0 0.25rem; }
  .meta { font-family: monospace; font-size: 0.75rem; color: var(--muted); }
  .badge { display: inline-block; font-family: monospace; font-size: 0.7rem; padding: 0.1rem 0.5rem;
           border: 1px solid var(--border); border-radius: 0.25rem; margin: 0 0.25rem 0.25rem 0; }
  .filters button { font-family: monospace; font-size: 0.75rem; padding: 0.2rem 0.7rem; margin: 0 0.3rem 0.3rem 0;
                    border: 1px solid var(--border); border-radius: 0.35rem; background: transparent; color: var(--muted);
                    cursor: pointer; text-transform: capitalize; }
  .filters button.active { color: var(--fg); border-color: var(--fg); }
  .toc { font-size: 0.85rem; border-left: 2px solid var(--border); padding-left: 1rem; margin: 2rem 0; }
  .toc ul { list-style: none; padding: 0; margin: 0; }
  .article-body pre { overflow-x: auto; padding: 1rem; border: 1px solid var(--border); border-radius: 0.5rem; }
  .article-body table { border-collapse: collapse; }
  .article-body td, .article-body th { border: 1px solid var(--border); padding: 0.3rem 0.6rem; }
  .article-nav { display: grid; grid-template-columns: 1fr 1fr; gap: 1rem; margin-top: 4rem;
                 border-top: 1px solid var(--border); padding-top: 2rem; }
  .article-nav .next { text-align: right; }
  .search-box input { width: 100%; padding: 0.5rem; font-size: 1rem; background: transparent; color: var(--fg);
                      border: 1px solid var(--border); border-radius: 0.35rem; }
  footer { border-top: 1px solid var(--border); padding-top: 2rem; padding-bottom: 2rem;
           display: flex; justify-content: space-between; font-size: 0.85rem; color: var(--muted); }
</style>
{% block head %}{% endblock %}
</head>
<body>
  <nav class="nav">
    <div class="nav-inner">
      <a href="/" class="brand">{{ icon("terminal", size=18) }}<span>~/{{ site.handle }}</span></a>
      <div class="nav-links">
        {% for link in nav_links %}<a href="{{ link.href }}">{{ link.label }}</a>{% endfor %}
        <button id="theme-toggle" aria-label="Toggle theme">{{ icon("sun", size=18) }}</button>
      </div>
    </div>
  </nav>

  <main>
    <div class="search-box" id="search">
      <input type="search" id="search-input" placeholder="Search articles..." aria-label="Search articles">
      <div id="search-results"></div>
    </div>
    {% block content %}{% endblock %}
  </main>

  <footer>
    <p>&copy; {{ year }} {{ site.author }}.</p>
    <div>
      <a href="/rss.xml">RSS</a>
      {% for social in social_links %} &middot; <a href="{{ social.url }}" rel="me">{{ social.name }}</a>{% endfor %}
    </div>
  </footer>

  <script src="https://unpkg.com/lucide@latest"></script>
  <script>
    if (window.lucide) { window.lucide.createIcons(); }
    document.getElementById("theme-toggle").addEventListener("click", function () {
      var root = document.documentElement;
      var dark = !root.classList.contains("dark");
      root.classList.toggle("dark", dark);
      localStorage.setItem("theme", dark ? "dark" : "light");
      window.dispatchEvent(new CustomEvent("theme-changed", { detail: { theme: dark ? "dark" : "light" } }));
    });
  </script>
  <script>
    (function () {
      var input = document.getElementById("search-input");
      var results = document.getElementById("search-results");
      var entries = null;
      function matches(entry, terms) {
        var haystack = (entry.title + " " + entry.content).toLowerCase();
        return terms.every(function (term) { return haystack.indexOf(term) !== -1; });
      }
      input.addEventListener("input", function () {
        var terms = input.value.toLowerCase().split(/\\s+/).filter(Boolean);
        if (!terms.length) { results.innerHTML = ""; return; }
        var render = function () {
          results.innerHTML = "";
          entries.filter(function (e) { return matches(e, terms); }).slice(0, 10).forEach(function (e) {
            var a = document.createElement("a");
            a.className = "card";
            a.href = e.url;
            a.textContent = e.title;
            results.appendChild(a);
          });
        };
        if (entries) { render(); return; }
        fetch("/search-index.json").then(function (r) { return r.json(); })
          .then(function (data) { entries = data; render(); })
          .catch(function () { console.warn("Search index not found. Run the build to generate it."); });
      });
    })();
  </script>
  {% block scripts %}{% endblock %}
</body>
</html>
"""

MACROS_TEMPLATE = """\
{% macro article_row(article, show_group=True) %}
<a class="card" href="{{ article.url_path }}" data-category="{{ article.category }}" data-group="{{ article.group or '' }}">
  <time class="meta" datetime="{{ article.date.isoformat() }}">{{ article.date | date_long }}</time>
  <h3>{{ icon(article.icon, article.icon_color or "", 16) }} {{ article.title }}</h3>
  {% if article.subtitle %}<p class="meta">{{ article.subtitle }}</p>{% endif %}
  <span class="badge">{{ article.category }}</span>
  {% if show_group and article.group %}<span class="badge">{{ article.group }}</span>{% endif %}
  <span class="meta">&bull; {{ article.read_time }}</span>
</a>
{% endmacro %}

{% macro collections(listings) %}
{% if listings %}
<section id="collections">
  <h2 class="section-title">Article Collections</h2>
  {% for listing in listings %}
  <div class="collection" data-collection="{{ listing.group.id }}">
    <h3>{{ icon(listing.group.icon, listing.group.icon_color, 20) }} {{ listing.group.name }}
      <span class="meta">{{ listing.articles | length }} {{ "article" if listing.articles | length == 1 else "articles" }}</span>
    </h3>
    <p class="meta">{{ listing.group.description }}</p>
    {% for article in listing.articles %}
    <a class="card" href="{{ article.url_path }}">
      <time class="meta">{{ article.date | date_short }}</time>
      <h4>{{ article.title }}</h4>
      {% if article.subtitle %}<p class="meta">{{ article.subtitle }}</p>{% endif %}
      {% for tag in article.tags[:3] %}<span class="badge">{{ tag }}</span>{% endfor %}
    </a>
    {% endfor %}
  </div>
  {% endfor %}
</section>
{% endif %}
{% endmacro %}
"""

INDEX_TEMPLATE = """\
{% extends "base.html" %}
{% from "macros.html" import article_row, collections %}
{% block content %}
<section id="hero">
  <h1>{{ site.author }}</h1>
  <p class="meta">{{ site.subtitle }}</p>
  <p>{{ site.description }}</p>
  <p>{% for social in social_links %}<a href="{{ social.url }}" aria-label="{{ social.name }}" rel="me">{{ icon(social.icon, "", 20) }}</a> {% endfor %}</p>
</section>

<section id="articles">
  <h2 class="section-title">Recent Articles</h2>
  {% for article in recent_articles %}{{ article_row(article) }}{% else %}<p class="meta">No articles yet.</p>{% endfor %}
  <a href="/articles/" class="meta">View all articles &rarr;</a>
</section>

{% if featured_articles %}
<section id="featured">
  <h2 class="section-title">Featured</h2>
  {% for article in featured_articles %}{{ article_row(article) }}{% endfor %}
</section>
{% endif %}

{{ collections(group_listings) }}

<section id="projects">
  <h2 class="section-title">Selected Works</h2>
  {% for project in projects %}
  <a class="card" href="{{ project.link }}">
    <h3>{{ project.title }} {{ icon("arrow-up-right", "", 14) }}</h3>
    <p class="meta">{{ project.role }}</p>
    <p>{{ project.description }}</p>
    {% for tech in project.tech %}<span class="badge">{{ tech }}</span>{% endfor %}
  </a>
  {% endfor %}
</section>
{% endblock %}
"""

ARTICLES_TEMPLATE = """\
{% extends "base.html" %}
{% from "macros.html" import article_row, collections %}
{% block title %}All Articles | {{ site.title }}{% endblock %}
{% block content %}
<section>
  <h1>All Articles</h1>
  <p>A complete archive of engineering deep-dives, technical explorations, and project post-mortems.</p>
</section>

{{ collections(group_listings) }}

<section class="filters" id="filters">
  <label class="meta">Category</label>
  <div data-filter="category">
    {% for category, count in categories %}<button data-value="{{ category }}" data-count="{{ count }}"{% if category == "all" %} class="active"{% endif %}>{{ category }} <span class="meta">{{ count }}</span></button>{% endfor %}
  </div>
  <label class="meta">Project Group</label>
  <div data-filter="group">
    {% for group, count in groups %}<button data-value="{{ group }}" data-count="{{ count }}"{% if group == "all" %} class="active"{% endif %}>{{ group }} <span class="meta">{{ count }}</span></button>{% endfor %}
  </div>
  <p class="meta">Showing <span id="shown-count">{{ articles | length }}</span> of {{ articles | length }} articles</p>
</section>

<section id="article-list">
  {% for article in articles %}{{ article_row(article) }}{% endfor %}
  <p class="meta" id="no-results"{% if articles %} hidden{% endif %}>No articles found matching the selected filters.</p>
</section>
{% endblock %}
{% block scripts %}
<script>
  (function () {
    var selected = { category: "all", group: "all" };
    var rows = Array.prototype.slice.call(document.querySelectorAll("#article-list .card"));
    function apply() {
      var shown = 0;
      rows.forEach(function (row) {
        var ok = (selected.category === "all" || row.dataset.category === selected.category) &&
                 (selected.group === "all" || row.dataset.group === selected.group);
        row.hidden = !ok;
        if (ok) { shown += 1; }
      });
      document.getElementById("shown-count").textContent = shown;
      document.getElementById("no-results").hidden = shown !== 0;
    }
    document.querySelectorAll("[data-filter]").forEach(function (box) {
      box.addEventListener("click", function (event) {
        var button = event.target.closest("button");
        if (!button) { return; }
        box.querySelectorAll("button").forEach(function (b) { b.classList.remove("active"); });
        button.classList.add("active");
        selected[box.dataset.filter] = button.dataset.value;
        apply();
      });
    });
  })();
</script>
{% endblock %}
"""

ARTICLE_TEMPLATE = """\
{% extends "base.html" %}
{% block title %}{{ article.title }} | {{ site.title }}{% endblock %}
{% block description %}{{ article.description }}{% endblock %}
{% block head %}
<meta property="og:title" content="{{ article.title }}">
<meta property="og:description" content="{{ article.description }}">
<meta property="og:type" content="article">
<meta property="article:published_time" content="{{ article.date.isoformat() }}">
{% for tag in article.tags %}<meta property="article:tag" content="{{ tag }}">
{% endfor %}
{% if math_enabled %}
<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/katex@0.16/dist/katex.min.css">
{% endif %}
{% endblock %}
{% block content %}
<article data-article-id="{{ article.id }}">
  <header>
    <p class="meta">
      <time datetime="{{ article.date.isoformat() }}">{{ article.date | date_long }}</time>
      &bull; {{ article.read_time }} &bull; <span class="badge">{{ article.category }}</span>
      {% if group %}<a class="badge" href="/articles/#collections">{{ group.name }}</a>{% endif %}
    </p>
    <h1 data-search-title>{{ icon(article.icon, article.icon_color or "", 28) }} {{ article.title }}</h1>
    {% if article.subtitle %}<p class="meta">{{ article.subtitle }}</p>{% endif %}
    <ul class="tags" aria-label="Tags">
      {% for tag in article.tags %}<li class="badge tag">{{ tag }}</li>{% endfor %}
    </ul>
    {% if article.external_links %}
    <p class="meta">{% for label, url in article.external_links %}<a href="{{ url }}" rel="noopener">{{ label }} {{ icon("arrow-up-right", "", 12) }}</a> {% endfor %}</p>
    {% endif %}
  </header>

  {% if toc %}
  <nav class="toc" aria-label="Table of contents">
    <p class="meta">On this page</p>
    <ul>
      {% for heading in toc %}<li style="padding-left: {{ (heading.depth - 2) * 12 }}px"><a href="#{{ heading.slug }}">{{ heading.text }}</a></li>{% endfor %}
    </ul>
  </nav>
  {% endif %}

  <div class="article-body" data-search-body>
    {{ article.html | safe }}
  </div>

  {% if prev_article or next_article %}
  <nav class="article-nav">
    {% if group %}<p class="meta" style="grid-column: 1 / -1">More from {{ group.name }}</p>{% endif %}
    {% if prev_article %}
    <a class="card prev" href="{{ prev_article.url_path }}">{{ icon("chevron-left", "", 16) }} <span class="meta">Previous</span><br>{{ prev_article.title }}</a>
    {% else %}<div></div>{% endif %}
    {% if next_article %}
    <a class="card next" href="{{ next_article.url_path }}"><span class="meta">Next</span> {{ icon("chevron-right", "", 16) }}<br>{{ next_article.title }}</a>
    {% endif %}
  </nav>
  {% endif %}
</article>
{% endblock %}
{% block scripts %}
{% if math_enabled %}
<script defer src="https://cdn.jsdelivr.net/npm/katex@0.16/dist/katex.min.js"></script>
<script defer src="https://cdn.jsdelivr.net/npm/katex@0.16/dist/contrib/auto-render.min.js"
        onload="renderMathInElement(document.querySelector('.article-body'), {delimiters: [{left: '$$', right: '$$', display: true}, {left: '$', right: '$', display: false}]});"></script>
{% endif %}
{% if diagrams_enabled and has_diagrams %}
<script type="module">
  import mermaid from "https://cdn.jsdelivr.net/npm/mermaid@11/dist/mermaid.esm.min.mjs";
  const themes = { light: {{ mermaid_light | tojson }}, dark: {{ mermaid_dark | tojson }} };
  const sources = Array.from(document.querySelectorAll("pre.mermaid")).map((el) => el.textContent);
  async function draw(theme) {
    const nodes = document.querySelectorAll("pre.mermaid");
    nodes.forEach((el, i) => { el.removeAttribute("data-processed"); el.textContent = sources[i]; });
    mermaid.initialize({ startOnLoad: false, ...themes[theme] });
    await mermaid.run({ nodes });
  }
  draw(document.documentElement.classList.contains("dark") ? "dark" : "light");
  window.addEventListener("theme-changed", (event) => draw(event.detail.theme));
</script>
{% endif %}
{% endblock %}
"""

ABOUT_TEMPLATE = """\
{% extends "base.html" %}
{% block title %}About | {{ site.title }}{% endblock %}
{% block content %}
<section>
  <h1>{{ page.title if page else "About" }}</h1>
  <p class="meta">{{ site.subtitle }}</p>
  {% if page %}<div class="article-body">{{ page.html | safe }}</div>{% else %}<p>{{ site.description }}</p>{% endif %}
  <ul>
    {% for social in social_links %}<li><a href="{{ social.url }}" rel="me">{{ icon(social.icon, "", 16) }} {{ social.name }}</a></li>{% endfor %}
  </ul>
</section>
{% endblock %}
"""

NOT_FOUND_TEMPLATE = """\
{% extends "base.html" %}
{% block title %}Page not found | {{ site.title }}{% endblock %}
{% block content %}
<section>
  <h1>404</h1>
  <p>This page does not exist. Head back to the <a href="/">home page</a> or browse <a href="/articles/">all articles</a>.</p>
</section>
{% endblock %}
"""

TEMPLATES = {
    "base.html": BASE_TEMPLATE,
    "macros.html": MACROS_TEMPLATE,
    "index.html": INDEX_TEMPLATE,
    "articles.html": ARTICLES_TEMPLATE,
    "article.html": ARTICLE_TEMPLATE,
    "about.html": ABOUT_TEMPLATE,
    "404.html": NOT_FOUND_TEMPLATE,
}


def _date_long(value) -> str:
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def _date_short(value) -> str:
    return value.strftime("%b '%y")


def build_environment() -> Environment:
    env = Environment(
        loader=DictLoader(TEMPLATES),
        autoescape=select_autoescape(default=True, default_for_string=True),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.globals["icon"] = render_icon
    env.filters["date_long"] = _date_long
    env.filters["date_short"] = _date_short
    return env
