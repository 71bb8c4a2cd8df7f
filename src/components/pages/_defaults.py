# ruff: noqa: E501
"""Default content for the editable pages."""

import json

from .models import EditablePage

DATE_PLACEHOLDER = "{last_updated}"

HOME_DEFAULTS = {
    "heroTitle": "The Best Product For You",
    "heroSubtitle": "TechReview",
    "heroDescription": (
        "We created this platform for everyone who spends hours researching before "
        "buying online. Here, you'll discover the best products, best prices, and honest "
        "reviews, all in one place. We don't sell anything; we simply research and "
        "recommend so you can shop smarter and confidently."
    ),
    "badgeText": "Trusted by 50,000+ Familys",
}

REVIEWS_DEFAULTS = {
    "pageTitle": "Product Reviews",
    "pageDescription": "Expert reviews and honest opinions on the latest products",
}

CONTACT_DEFAULTS = {
    "pageTitle": "Contact Us",
    "pageDescription": "Have questions or suggestions? We'd love to hear from you!",
}

# Values the public pages show when a stored field is empty or unparsable.
PUBLIC_FALLBACKS: dict[str, dict[str, str]] = {
    "home": {
        **HOME_DEFAULTS,
        "heroDescription": (
            "Discover honest, in-depth reviews of the latest tech products to help you "
            "make the perfect purchase."
        ),
    },
    "reviews": {
        "pageTitle": "All Reviews",
        "pageDescription": "Browse our complete collection of product reviews",
    },
    "contact": dict(CONTACT_DEFAULTS),
}

ABOUT_HTML = """<h1>About TechReview</h1>
<p>Welcome to TechReview, your trusted source for honest, in-depth product reviews. We're passionate about technology and helping you make informed buying decisions.</p>
<p>Our team of experienced reviewers thoroughly tests each product before writing a review. We don't just regurgitate specs - we use products in real-world scenarios to give you practical insights.</p>
<h2>Our Promise</h2>
<ul>
<li>Honest, unbiased reviews based on real testing</li>
<li>Clear pros and cons for every product</li>
<li>Transparent affiliate disclosure</li>
<li>Regular updates as products evolve</li>
</ul>"""

SITEMAP_HTML = """<h1>Sitemap</h1>
<p>Navigate through all pages on our website</p>

<h2>Main Pages</h2>
<ul>
<li><a href="/">Home</a></li>
<li><a href="/reviews">All Reviews</a></li>
<li><a href="/about">About Us</a></li>
<li><a href="/contact">Contact</a></li>
</ul>

<h2>Legal Pages</h2>
<ul>
<li><a href="/privacy-policy">Privacy Policy</a></li>
<li><a href="/terms-of-service">Terms of Service</a></li>
<li><a href="/disclaimer">Disclaimer</a></li>
</ul>

<h2>Admin</h2>
<ul>
<li><a href="/dashboard">Admin Dashboard</a></li>
</ul>"""

PRIVACY_HTML = f"""<h1>Privacy Policy</h1>
<p>Last updated: {DATE_PLACEHOLDER}</p>
<h2>Information We Collect</h2>
<p>We collect information that you provide directly to us when you use our services.</p>
<h2>How We Use Your Information</h2>
<p>We use the information we collect to provide, maintain, and improve our services.</p>
<h2>Contact Us</h2>
<p>If you have any questions about this Privacy Policy, please contact us.</p>"""

TERMS_HTML = f"""<h1>Terms of Service</h1>
<p>Last updated: {DATE_PLACEHOLDER}</p>
<h2>Acceptance of Terms</h2>
<p>By accessing our website, you agree to be bound by these terms of service.</p>
<h2>Use License</h2>
<p>Permission is granted to temporarily use our website for personal, non-commercial use only.</p>
<h2>Disclaimer</h2>
<p>The materials on our website are provided on an 'as is' basis.</p>"""

DISCLAIMER_HTML = f"""<h1>Affiliate Disclaimer</h1>
<p>Last updated: {DATE_PLACEHOLDER}</p>
<h2>Affiliate Links</h2>
<p>This website contains affiliate links. When you click on these links and make a purchase, we may earn a commission at no additional cost to you.</p>
<h2>Honest Reviews</h2>
<p>Our reviews are based on our honest opinions and testing. We only recommend products we believe provide value to our readers.</p>
<h2>Disclosure</h2>
<p>We are committed to transparency and will always disclose when content contains affiliate links.</p>"""

EDITABLE_PAGES: tuple[EditablePage, ...] = (
    EditablePage("home", "Home", "json", json.dumps(HOME_DEFAULTS, indent=2), "/"),
    EditablePage(
        "reviews", "All Reviews", "json", json.dumps(REVIEWS_DEFAULTS, indent=2), "/reviews"
    ),
    EditablePage("about", "About Us", "html", ABOUT_HTML, "/about"),
    EditablePage("contact", "Contact", "json", json.dumps(CONTACT_DEFAULTS, indent=2), "/contact"),
    EditablePage("sitemap", "Sitemap", "html", SITEMAP_HTML, "/sitemap"),
    EditablePage("privacy-policy", "Privacy Policy", "html", PRIVACY_HTML, "/privacy-policy"),
    EditablePage(
        "terms-of-service", "Terms of Service", "html", TERMS_HTML, "/terms-of-service"
    ),
    EditablePage("disclaimer", "Disclaimer", "html", DISCLAIMER_HTML, "/disclaimer"),
)
