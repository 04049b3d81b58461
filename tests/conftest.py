"""Shared fixtures: a small Star Wars style schema and operations on it."""

import pytest

from gql_opgen.core.parser import parse_schema

SCHEMA_SDL = '''
scalar DateTime
scalar Money

enum Episode {
  NEWHOPE
  EMPIRE
  JEDI
  CLONES @deprecated(reason: "Not canon")
}

enum Unused {
  A
  B
}

"""A review of a film."""
input ReviewInput {
  stars: Int!
  commentary: String
  favoriteColor: ColorInput
  from: String
  budget: Money
}

input ColorInput {
  red: Int!
  green: Int!
  blue: Int!
}

input TreeFilter {
  and: [TreeFilter!]
  not: TreeFilter
  name: String
}

input PairA {
  b: PairB!
}

input PairB {
  a: PairA
}

input UnusedInput {
  x: Int
}

interface Character {
  id: ID!
  name: String!
}

type Human implements Character {
  id: ID!
  name: String!
  height: Float
  homePlanet: String
}

type Droid implements Character {
  id: ID!
  name: String!
  primaryFunction: String
}

union SearchResult = Human | Droid

type Review {
  stars: Int!
  commentary: String
  createdAt: DateTime
  price: Money
}

type Query {
  hero(episode: Episode): Character
  human(id: ID!): Human
  search(text: String!): [SearchResult!]!
  reviews(episode: Episode!, filter: TreeFilter): [Review]
  legacyField: String @deprecated(reason: "Use hero")
  pair(a: PairA): Int
}

type Mutation {
  createReview(episode: Episode, review: ReviewInput!): Review
}
'''

# Names that shadow what generated modules import, or collide once converted
CLASH_SDL = '''
scalar Date

enum Field {
  A
  B
}

enum List {
  ONE
}

input Filter {
  kind: Field
  shape: List
  firstName: String
  userId: Int
  user_id: Int
}

type Event {
  date: Date
  str: String
}

type Name {
  first: String
}

type User {
  name: Name
}

type Last {
  last: String
}

type Query {
  event(date: Date, filter: Filter): Event
  user: User
  userName: Last
}
'''

HERO_QUERY = '''query HeroName($episode: Episode = JEDI) {
  hero(episode: $episode) {
    __typename
    name
    ... on Human {
      height
    }
    ... on Droid {
      primaryFunction
    }
  }
}
'''

CREATE_REVIEW_MUTATION = '''mutation CreateReview($episode: Episode, $review: ReviewInput!) {
  createReview(episode: $episode, review: $review) {
    stars
    commentary
    createdAt
  }
}
'''

NO_VARIABLES_QUERY = '''query Everyone {
  search(text: "a") {
    ... on Human {
      id
      name
    }
  }
}
'''


@pytest.fixture
def schema():
    """A freshly parsed schema (reachability marks are per run)."""
    return parse_schema(SCHEMA_SDL)


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "schema.graphql"
    path.write_text(SCHEMA_SDL)
    return path


@pytest.fixture
def query_file(tmp_path):
    path = tmp_path / "queries.graphql"
    path.write_text(HERO_QUERY + "\n" + CREATE_REVIEW_MUTATION)
    return path


@pytest.fixture
def clash_schema():
    return parse_schema(CLASH_SDL)
