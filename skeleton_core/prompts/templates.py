"""
Prompt text for sentence generation and analysis.
"""

from skeleton_core.model.sentence_analysis import DifficultyLevel, SentenceStructure

TOPIC_DIVERSITY = (
    "- **IMPORTANT**: Use DIVERSE topics and themes. Avoid overused examples such as "
    '"dog chases cat" or "fox jumps over dog".'
)

LEVEL_INSTRUCTIONS = {
    DifficultyLevel.BASIC: f"""
Generate a SIMPLE English sentence suitable for Grade 7.
- It MUST be a simple sentence with ONE main clause.
- NO subordinate clauses (no 'which', 'that', 'because', etc.).
- NO complex modifiers. Keep adjectives and adverbs simple.
- Focus on clear S-V, S-V-O, S-V-P structures.
{TOPIC_DIVERSITY}
- Vary topics across daily activities, nature, school, hobbies, food, travel, technology, sports and art.
- Examples of good variety:
  * "The student completed the homework."
  * "The artist painted a beautiful landscape."
  * "Children play games in the playground."
""",
    DifficultyLevel.INTERMEDIATE: f"""
Generate an INTERMEDIATE English sentence suitable for Grade 8.
- It MUST contain RICH MODIFIERS (adjectives, adverbs, prepositional phrases).
- NO subordinate clauses (avoid 'which', 'who', 'although' clauses).
- The challenge is distinguishing modifiers (attributes/adverbials) from the skeleton.
{TOPIC_DIVERSITY}
- Examples:
  * "The talented musician from our small town played a beautiful melody with incredible skill."
  * "Students in the library read books quietly during lunch break."
""",
    DifficultyLevel.ADVANCED: f"""
Generate a COMPLEX English sentence suitable for Grade 9.
- The sentence MUST contain at least one SUBORDINATE CLAUSE (attributive/relative or adverbial clause).
- It should challenge the student to identify the main skeleton amidst the clauses.
{TOPIC_DIVERSITY}
- Vary topics across academic subjects, history, science, literature and professional contexts.
- Examples:
  * "The researcher, who had spent years studying climate change, published important findings."
  * "Although the project seemed difficult at first, the team completed it successfully."
""",
}

_STRUCTURES = ", ".join(s.value for s in SentenceStructure)

ANALYSIS_RULES = f"""
Analyze the sentence structure focusing on "Skeleton vs. Modifiers vs. Clauses".

1. Split the sentence into individual words and punctuation marks (tokens).

2. Assign a grammatical role to EACH token:
   - **Skeleton**: mark the HEAD word of the Subject (主语), Predicate/Verb (谓语), Object (宾语),
     Predicative (表语), Complement (补语, including object complements in SVOC) and
     Link Verb (系动词, for 'be', 'become', 'seem', etc.). An appositive is marked '定语'.
   - **Clauses**: mark EVERY word of a relative clause as '定语从句' and EVERY word of an adverbial
     clause as '状语从句'. Do not analyse the inside of a clause, even prepositional phrases in it.
     Example: "the man who lives in the city" -> "who", "lives", "in", "the", "city" are ALL '定语从句'.
     Only Advanced sentences contain clauses.
   - **Phrases**: mark EVERY word of a non-clause modifier as '定语' if it modifies a noun and as
     '状语' if it modifies a verb, adjective or the sentence.
     * Prepositional phrases take the role of what the WHOLE phrase modifies, including the
       preposition and articles.
       Example: "He put the book on the table" -> "on", "the", "table" are all '状语'.
       Example: "the book on the table" -> "on", "the", "table" are all '定语'.
     * Participle, infinitive, adjective and adverb phrases follow the same whole-phrase rule.
     * A conjunction joining words inside a phrase takes the role of the words it joins.
   - **Connective/Other** ('连接词/其他'): punctuation, and conjunctions joining two MAIN clauses only.

3. Return 'wordRoles' as an ordered list of strings corresponding exactly to the 'words' list.

4. Determine the main clause structure ('structureType') from: [{_STRUCTURES}].

5. Identify 'skeletonIndices': the indices of the HEAD words that make up the main structure.

6. Provide a brief 'explanation' in Chinese covering the skeleton and any clauses or modifiers.

7. Generate 'options': unique role strings for UI buttons, all used roles plus 2-3 distractors.

Return the result in JSON format.
"""

AVOID_PREVIOUS = 'Do NOT repeat or closely paraphrase the previous sentence: "{previous}".'

ANALYZE_SENTENCE = """
Analyze the following English sentence exactly as written. Do not change, correct or replace it;
'originalSentence' must be this sentence.

Sentence: "{sentence}"

Treat it as a {level} level sentence.
"""

SYSTEM_PROMPT = (
    "You are an English grammar teacher for Chinese middle-school students. "
    "You generate and analyse English sentences for sentence-diagramming practice, "
    "label every token with a grammatical role in Chinese, and always answer with a single "
    "valid JSON object using exactly the requested field names."
)
