"""
Keyword tables for the 14-dimension scorer.

Multilingual keywords: EN + ZH + JP + RU + DE. Every entry is lowercase and
matched as a plain substring of the lowercased prompt.
"""

CODE_KEYWORDS = (
    "function", "class", "import", "def", "select", "async", "await",
    "const", "let", "var", "return", "```",
    "函数", "类", "导入", "异步",
    "関数",
    "функция", "класс",
    "funktion", "klasse", "importieren",
)

REASONING_KEYWORDS = (
    "prove", "theorem", "derive", "step by step", "chain of thought",
    "formally", "mathematical", "proof", "logically",
    "证明", "定理", "推导", "逐步",
    "доказать", "теорема", "шаг за шагом",
    "beweisen", "beweis", "schritt für schritt", "mathematisch", "logisch",
)

SIMPLE_KEYWORDS = (
    "what is", "define", "translate", "hello", "yes or no", "capital of",
    "how old", "who is", "when was",
    "什么是", "你好",
    "что такое", "привет",
    "was ist", "hallo", "definiere",
)

TECHNICAL_KEYWORDS = (
    "algorithm", "optimize", "architecture", "distributed", "kubernetes",
    "microservice", "database", "infrastructure",
    "算法", "优化", "架构",
    "алгоритм", "архитектура",
    "algorithmus", "optimieren", "architektur", "datenbank",
)

CREATIVE_KEYWORDS = (
    "story", "poem", "compose", "brainstorm", "creative", "imagine", "write a",
    "故事", "诗",
    "история", "стихотворение",
    "geschichte", "gedicht", "kreativ",
)

IMPERATIVE_VERBS = (
    "build", "create", "implement", "design", "develop", "construct",
    "generate", "deploy", "configure", "set up",
    "构建", "创建", "实现",
    "создать", "реализовать",
    "erstellen", "implementieren", "entwerfen", "entwickeln",
)

CONSTRAINT_INDICATORS = (
    "under", "at most", "at least", "within", "no more than", "o(",
    "maximum", "minimum", "limit", "budget",
    "不超过", "至少",
    "не более", "максимум",
    "höchstens", "mindestens",
)

OUTPUT_FORMAT_KEYWORDS = (
    "json", "yaml", "xml", "table", "csv", "markdown", "schema",
    "format as", "structured",
    "表格", "结构化",
    "таблица",
    "tabelle", "strukturiert",
)

REFERENCE_KEYWORDS = (
    "above", "below", "previous", "following", "the docs", "the api",
    "the code", "earlier", "attached",
    "上面", "文档",
    "документация",
    "dokumentation", "der code",
)

NEGATION_KEYWORDS = (
    "don't", "do not", "avoid", "never", "without", "except", "exclude",
    "no longer",
    "不要", "避免",
    "нельзя", "избегать",
    "vermeide", "niemals", "ohne",
)

DOMAIN_SPECIFIC_KEYWORDS = (
    "quantum", "fpga", "vlsi", "risc-v", "asic", "photonics", "genomics",
    "proteomics", "topological", "homomorphic", "zero-knowledge", "lattice-based",
    "量子",
    "квантовый",
    "quanten", "photonik", "genomik",
)

# File/tool/iteration verbs that suggest multi-step tool use
AGENTIC_TASK_KEYWORDS = (
    "read file", "read the file", "look at", "check the", "open the",
    "edit", "modify", "update the", "change the", "write to", "create file",
    "execute", "deploy", "install", "npm", "pip", "compile",
    "after that", "and also", "once done", "step 1", "step 2",
    "fix", "debug", "until it works", "keep trying", "iterate",
    "make sure", "verify", "confirm",
    "读取文件", "编辑", "修改", "部署", "修复", "调试",
)
